"""Report builders and the shared template renderer"""
