"""Batch translation route."""

from flask import Blueprint, request, jsonify, current_app

from translate_bridge.utils.errors import BadRequest

translate_bp = Blueprint('translate', __name__)


def read_json_body() -> dict:
    """Parse the request body. An empty body is treated as ``{}``."""
    if not request.get_data(cache=True).strip():
        return {}
    data = request.get_json(force=True, silent=True)
    if data is None:
        raise BadRequest('Invalid JSON body')
    return data if isinstance(data, dict) else {}


@translate_bp.route('/translate-batch', methods=['POST'])
def translate_batch():
    """Translate a batch of text fragments.

    Body:
        - sourceLang, targetLang: language codes ('auto' allowed for source)
        - model: codex model name (optional)
        - mode: 'bilingual' | 'translation-only'
        - tone: 'natural' | 'faithful' | 'concise'
        - batchSize: items per codex call (1-20)
        - maxCharsPerItem: clip length per item (100-5000)
        - items: [{id?, text}]
    """
    payload = read_json_body()
    service = current_app.extensions['translation_service']
    return jsonify(service.translate_batch(payload)), 200
