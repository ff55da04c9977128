import os

os.environ.setdefault("USE_MOCK_DB", "true")

from fastapi.testclient import TestClient
from participium.main import app

with TestClient(app) as client:
    print('ROOT:')
    print(client.get('/').json())

    print('\nHEALTH:')
    print(client.get('/api/health').json())

    print('\nDB HEALTH:')
    resp = client.get('/api/health/db')
    print(resp.status_code)
    print(resp.json())

    print('\nPUBLIC REPORTS:')
    resp = client.get('/api/reports')
    print(resp.status_code, resp.json())
