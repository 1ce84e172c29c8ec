from fastapi.testclient import TestClient
from app.main import app

client = TestClient(app, raise_server_exceptions=False)

print('ROOT:')
print(client.get('/').json())

print('\nHEALTH:')
print(client.get('/health').json())

print('\nDB HEALTH:')
resp = client.get('/health/db')
print(resp.status_code, resp.json())

print('\nLOGIN:')
resp = client.post('/api/login', json={'username': 'user', 'password': 'pass'})
print(resp.status_code, resp.json())

print('\nALERTS:')
resp = client.get('/api/alerts')
print(resp.status_code, resp.json())

print('\nRESOURCES:')
resp = client.get('/api/resources')
print(resp.status_code, resp.json())
