# backend/wsgi.py
from insights import create_app

app = create_app()
