# File Secretary - serving layer for routed file URLs
import os
import sys
import logging

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.middleware.proxy_fix import ProxyFix

# Load environment variables from .env file
load_dotenv()

# Configure logging
log_level = os.environ.get('LOG_LEVEL', 'INFO').upper()
handler = logging.StreamHandler(sys.stdout)
handler.setLevel(log_level)
formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
handler.setFormatter(formatter)

# Get the root logger and clear any existing handlers to avoid duplicates
root_logger = logging.getLogger()
root_logger.handlers.clear()
root_logger.setLevel(log_level)
root_logger.addHandler(handler)

app = Flask(__name__)
app.config['SQLALCHEMY_DATABASE_URI'] = os.environ.get('SQLALCHEMY_DATABASE_URI', 'sqlite:///file_secretary.db')
app.config['APPLICATION_ROOT'] = os.environ.get('APPLICATION_ROOT', '/')
app.config['PREFERRED_URL_SCHEME'] = os.environ.get('PREFERRED_URL_SCHEME', 'http')
# Lets external routed URLs be built outside a request (CLI, background jobs)
if os.environ.get('SERVER_NAME'):
    app.config['SERVER_NAME'] = os.environ['SERVER_NAME']

# Apply ProxyFix so external routed URLs carry the proxy's scheme and host
trusted_proxy_hops = int(os.environ.get('TRUSTED_PROXY_HOPS', '1'))
app.wsgi_app = ProxyFix(
    app.wsgi_app,
    x_for=trusted_proxy_hops,
    x_proto=trusted_proxy_hops,
    x_host=trusted_proxy_hops,
    x_prefix=trusted_proxy_hops
)

from file_secretary.database import db
db.init_app(app)

from file_secretary.models import PersistedFile
from file_secretary.api import files_bp
from file_secretary.config import load_config_file
from file_secretary.services.urls import get_url_generator

app.register_blueprint(files_bp)

with app.app_context():
    db.create_all()

url_generator = get_url_generator()
app.logger.info(f"URL generator ready with contexts: {url_generator.registry.context_names}")


@app.route('/api/files/<uuid>/urls', methods=['GET'])
def file_urls(uuid):
    """URL and image variant URLs of a tracked file."""
    persisted = PersistedFile.query.filter_by(uuid=uuid).first()
    if not persisted:
        return jsonify({'error': 'File not found'}), 404

    templates = persisted.image_templates()
    return jsonify({
        'file': persisted.to_dict(),
        'url': persisted.url(),
        'image_templates': templates.to_dict() if templates else None,
    })


def reload_url_config(path=None):
    """Reload contexts and templates from disk and purge computed addresses."""
    path = path or os.environ.get('FILE_SECRETARY_CONFIG')
    if not path:
        app.logger.warning("No FILE_SECRETARY_CONFIG to reload from")
        return False
    get_url_generator().reload(load_config_file(path))
    return True


if __name__ == '__main__':
    import argparse
    parser = argparse.ArgumentParser()
    parser.add_argument('--debug', action='store_true', help='Run in debug mode')
    parser.add_argument('--port', type=int, default=8899)
    args = parser.parse_args()

    # For production use waitress or gunicorn:
    # waitress-serve --host 0.0.0.0 --port 8899 file_secretary.app:app
    app.run(host='0.0.0.0', port=args.port, debug=args.debug)
