#!/usr/bin/env python3
"""Print the URL, and image variant URLs, of a file stored under a context."""

from __future__ import annotations

import argparse
import json
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from file_secretary.app import app  # noqa: E402
from file_secretary.exceptions import FileSecretaryError  # noqa: E402
from file_secretary.models import PersistedFile  # noqa: E402
from file_secretary.services.urls import RemoteFile, get_url_generator  # noqa: E402


def parse_args():
    p = argparse.ArgumentParser(description='Resolve file URLs for a context path or a tracked file')
    p.add_argument('--uuid', type=str, default=None, help='UUID of a tracked file')
    p.add_argument('--context', type=str, default=None)
    p.add_argument('--relative', type=str, default=None, help='Path after the context folder, e.g. sib/abc.png')
    p.add_argument('--routed', action='store_true', help='Ignore base addresses and print routed URLs')
    p.add_argument('--server-name', type=str, default='localhost:8899')
    return p.parse_args()


def main():
    args = parse_args()
    generator = get_url_generator()
    prefer_base = not args.routed

    if not args.uuid and not (args.context and args.relative):
        print('ERROR: pass --uuid, or --context together with --relative', file=sys.stderr)
        return 2

    # Routed URLs need a request context for url_for
    with app.test_request_context(base_url=f"http://{args.server_name}"):
        try:
            if args.uuid:
                persisted = PersistedFile.query.filter_by(uuid=args.uuid).first()
                if not persisted:
                    print(f'ERROR: no file with uuid {args.uuid}', file=sys.stderr)
                    return 1
                url = generator.url_for_persisted_file(persisted, prefer_base)
                templates = generator.image_templates_for_persisted_file(persisted, prefer_base)
            else:
                context = generator.registry.get_context_data(args.context)
                remote = RemoteFile(args.context, context.context_folder, args.relative)
                url = generator.url_for_remote_file(remote, prefer_base)
                templates = generator.image_templates_for_remote_file(remote, prefer_base)
        except FileSecretaryError as exc:
            print(f'ERROR: {exc}', file=sys.stderr)
            return 1

    print(json.dumps({
        'url': url,
        'image_templates': templates.to_dict() if templates else None,
    }, indent=2))
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
