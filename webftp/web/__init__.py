"""Web-facing helpers for webftp.

- HttpResponse: Byte payload with headers, produced by downloads
- ErrorHandler: Reports uncaught errors and answers with a 500
"""
