"""
Todo API package.

A FastAPI service that writes todos to Postgres, a Redis title cache and an
Elasticsearch index, and reads them back cache first. The ASGI app lives in
`todo_api.main`.
"""

__version__ = "0.1.0"
