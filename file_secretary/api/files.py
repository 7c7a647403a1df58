"""
Routed file serving.

Serves files of contexts that have no direct base address, or when a
caller asks for a routed URL explicitly.
"""

import logging
import os

from flask import Blueprint, abort, send_file

from file_secretary.exceptions import UnknownContextError
from file_secretary.services.urls import get_url_generator
from file_secretary.utils.paths import local_path_from_key

logger = logging.getLogger(__name__)

# Create blueprint
files_bp = Blueprint('files', __name__)


# --- Routes ---

@files_bp.route('/files/<context_name>/<context_folder>/<path:after_context_path>', methods=['GET'])
def download_file(context_name, context_folder, after_context_path):
    """Stream a file from the local root of its context."""
    registry = get_url_generator().registry
    try:
        context = registry.get_context_data(context_name)
    except UnknownContextError:
        abort(404)

    if not context.driver_root:
        abort(404)

    # Contexts may share a driver_root; each one only serves its own folder
    if context_folder != context.context_folder:
        abort(404)

    try:
        path = local_path_from_key(context.driver_root, f"{context_folder}/{after_context_path}")
    except ValueError:
        logger.warning(f"Rejected download path outside context root: {context_name}/{after_context_path}")
        abort(404)

    if not os.path.isfile(path):
        abort(404)

    return send_file(path)
