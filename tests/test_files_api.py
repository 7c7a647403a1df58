#!/usr/bin/env python3
"""
Tests for the routed download endpoint and the file URL API.

Uses an in-memory SQLite database and a temporary context root.

Run with: python tests/test_files_api.py
"""

import os
import shutil
import sys
import tempfile
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Must be set before the app module is imported
os.environ['SQLALCHEMY_DATABASE_URI'] = 'sqlite://'

from file_secretary.app import app, reload_url_config
from file_secretary.database import db
from file_secretary.models import PersistedFile
from file_secretary.services.urls import (
    ContextRegistry, UrlGenerator, get_url_generator, reset_url_generator_singleton, set_url_generator,
)


class TestDownloadEndpoint(unittest.TestCase):

    def setUp(self):
        self.root = tempfile.mkdtemp(prefix='file_secretary_')
        self.addCleanup(shutil.rmtree, self.root, True)
        os.makedirs(os.path.join(self.root, 'avatars', 'abc_sib'))
        with open(os.path.join(self.root, 'avatars', 'abc_sib', 'abc.png'), 'wb') as f:
            f.write(b'\x89PNG fake image')
        with open(os.path.join(self.root, 'secret.txt'), 'w') as f:
            f.write('outside the context folder')
        os.makedirs(os.path.join(self.root, 'private'))
        with open(os.path.join(self.root, 'private', 'secret.txt'), 'w') as f:
            f.write('private data')

        self.config = {
            'contexts': {
                'avatars': {
                    'category': 'image',
                    'context_folder': 'avatars',
                    'driver_root': self.root,
                    'allowed_templates': {'thumb': {'encodings': ['webp']}},
                },
                'documents': {
                    'category': 'file',
                    'context_folder': 'private',
                    'driver_root': self.root,
                },
                'cdn_only': {
                    'category': 'file',
                    'context_folder': 'cdn',
                    'driver_base_address': 'https://cdn.example.com',
                },
            },
        }
        set_url_generator(UrlGenerator(ContextRegistry(self.config)))
        self.addCleanup(reset_url_generator_singleton)
        self.client = app.test_client()

    def test_download_routed_file(self):
        with app.test_request_context():
            url = get_url_generator().resolve('avatars', 'avatars', 'abc_sib/abc.png')
        self.assertEqual(url, '/files/avatars/avatars/abc_sib/abc.png')

        response = self.client.get(url)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data, b'\x89PNG fake image')
        response.close()

    def test_missing_file_is_404(self):
        response = self.client.get('/files/avatars/avatars/abc_sib/thumb.webp')
        self.assertEqual(response.status_code, 404)

    def test_unknown_context_is_404(self):
        response = self.client.get('/files/nope/avatars/abc_sib/abc.png')
        self.assertEqual(response.status_code, 404)

    def test_context_without_root_is_404(self):
        response = self.client.get('/files/cdn_only/cdn/a.png')
        self.assertEqual(response.status_code, 404)

    def test_other_folder_under_shared_root_is_404(self):
        response = self.client.get('/files/avatars/private/secret.txt')
        self.assertEqual(response.status_code, 404)

        response = self.client.get('/files/documents/private/secret.txt')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data, b'private data')
        response.close()

    def test_traversal_is_rejected(self):
        response = self.client.get('/files/avatars/avatars/%2E%2E/%2E%2E/secret.txt')
        self.assertEqual(response.status_code, 404)


class TestFileUrlsApi(unittest.TestCase):

    def setUp(self):
        config = {
            'contexts': {
                'avatars': {
                    'category': 'image',
                    'context_folder': 'avatars',
                    'allowed_templates': {'thumb': {'encodings': ['webp']}},
                },
            },
        }
        set_url_generator(UrlGenerator(ContextRegistry(config)))
        self.addCleanup(reset_url_generator_singleton)

        with app.app_context():
            db.session.add(PersistedFile(
                uuid='abc', context='avatars', context_folder='avatars',
                original_name='me.png', file_name='abc_sib/abc.png', sibling_folder='abc_sib',
            ))
            db.session.commit()
        self.addCleanup(self._delete_files)
        self.client = app.test_client()

    def _delete_files(self):
        with app.app_context():
            PersistedFile.query.delete()
            db.session.commit()

    def test_file_urls(self):
        response = self.client.get('/api/files/abc/urls')
        self.assertEqual(response.status_code, 200)
        payload = response.get_json()
        self.assertEqual(payload['url'], '/files/avatars/avatars/abc_sib/abc.png')
        self.assertEqual(payload['file']['extension'], 'png')
        self.assertEqual(payload['image_templates'], {
            'parent_image_url': '/files/avatars/avatars/abc_sib/abc.png',
            'parent_extension': 'png',
            'children': {'thumb.webp': '/files/avatars/avatars/abc_sib/thumb.webp'},
        })

    def test_urls_outside_a_request(self):
        with app.app_context():
            persisted = PersistedFile.query.filter_by(uuid='abc').first()
            self.assertEqual(persisted.url(), '/files/avatars/avatars/abc_sib/abc.png')
            self.assertEqual(persisted.image_templates().children, {
                'thumb.webp': '/files/avatars/avatars/abc_sib/thumb.webp',
            })

    def test_unknown_file(self):
        response = self.client.get('/api/files/missing/urls')
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.get_json(), {'error': 'File not found'})


class TestReloadConfig(unittest.TestCase):

    def setUp(self):
        set_url_generator(UrlGenerator(ContextRegistry({
            'contexts': {'cdn': {'category': 'file', 'context_folder': 'c', 'driver_base_address': 'https://old.example.com'}},
        })))
        self.addCleanup(reset_url_generator_singleton)

    def test_reload_from_file_purges_cache(self):
        generator = get_url_generator()
        self.assertEqual(generator.full_relative_url('cdn', 'a'), 'https://old.example.com/a')

        fd, path = tempfile.mkstemp(suffix='.json')
        with os.fdopen(fd, 'w') as f:
            f.write('{"contexts": {"cdn": {"category": "file", "context_folder": "c", '
                    '"driver_base_address": "https://new.example.com"}}}')
        self.addCleanup(os.remove, path)

        self.assertTrue(reload_url_config(path))
        self.assertEqual(generator.full_relative_url('cdn', 'a'), 'https://new.example.com/a')


if __name__ == '__main__':
    unittest.main()
