import importlib.util
from pathlib import Path

from app import app

ROOT = Path(__file__).resolve().parent.parent

FIREBASE_SETTINGS = {
    'FIREBASE_API_KEY': 'AIza-test',
    'FIREBASE_AUTH_DOMAIN': 'smarthome.firebaseapp.com',
    'FIREBASE_PROJECT_ID': 'smarthome',
    'FIREBASE_STORAGE_BUCKET': 'smarthome.appspot.com',
    'FIREBASE_MESSAGING_SENDER_ID': '1234',
    'FIREBASE_APP_ID': '1:1234:web:abcd',
    'FIREBASE_MEASUREMENT_ID': '',
}


def test_health_endpoint(client):
    resp = client.get('/health')
    assert resp.status_code == 200
    assert resp.get_json()['status'] == 'ok'


def test_unknown_path_returns_json_404(client):
    resp = client.get('/missing-page')
    assert resp.status_code == 404
    assert resp.get_json() == {'ok': False, 'error': 'not_found'}


def test_client_config_served_when_configured(client, monkeypatch):
    for key, value in FIREBASE_SETTINGS.items():
        monkeypatch.setitem(app.config, key, value)

    resp = client.get('/client-config')

    assert resp.status_code == 200
    config = resp.get_json()['config']
    assert config['apiKey'] == 'AIza-test'
    assert config['projectId'] == 'smarthome'
    assert config['messagingSenderId'] == '1234'
    assert config['measurementId'] == ''


def test_client_config_missing_project_id(client, monkeypatch):
    monkeypatch.setitem(app.config, 'FIREBASE_API_KEY', 'AIza-test')
    monkeypatch.setitem(app.config, 'FIREBASE_PROJECT_ID', '')

    resp = client.get('/client-config')

    assert resp.status_code == 503
    assert resp.get_json() == {'ok': False, 'error': 'client_config_missing'}


def test_vercel_entry_point_exposes_app():
    spec = importlib.util.spec_from_file_location('vercel_index', ROOT / 'api' / 'index.py')
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    assert module.app is app
