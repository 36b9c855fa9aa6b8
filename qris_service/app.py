"""
QRIS Microservice - dynamic QRIS generation service
Port: 33416
"""

import io
import logging
from decimal import Decimal

from flask import Flask, jsonify, request, send_file, url_for
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from .cache import ArtifactCache
from .config import Settings
from .crc import checksum
from .errors import MissingInput, QrisError
from .renderer import QRCodeRenderer, to_data_url
from .rewriter import PayloadRewriter
from .service import QrisService

LOG = logging.getLogger("qris_service.app")


def build_service(settings: Settings) -> QrisService:
    cache = ArtifactCache(
        ttl=settings.artifact_ttl,
        sweep_interval=settings.sweep_interval,
        max_entries=settings.cache_max_entries,
    )
    return QrisService(PayloadRewriter(settings.amount_mode), QRCodeRenderer(), cache)


def format_rupiah(amount: Decimal) -> str:
    """Format an amount as ``Rp 1.500.000`` or ``Rp 1.500,50``."""
    whole, _, fraction = format(amount, "f").partition(".")
    grouped = f"{int(whole):,}".replace(",", ".")
    if fraction and int(fraction):
        return f"Rp {grouped},{fraction[:2].ljust(2, '0')}"
    return f"Rp {grouped}"


def _json_amount(amount: Decimal):
    if amount == amount.to_integral_value():
        return int(amount)
    return float(amount)


def create_app(settings: Settings = None, service: QrisService = None) -> Flask:
    settings = settings or Settings.from_env()
    service = service or build_service(settings)

    app = Flask(__name__)
    CORS(app)
    app.extensions["qris_service"] = service

    @app.errorhandler(QrisError)
    def handle_qris_error(e):
        if e.status_code >= 500:
            LOG.error("request failed: %s", e.message)
        else:
            LOG.info("rejected request: %s", e.message, extra={"code": e.code})
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        if isinstance(e, HTTPException):
            return e
        LOG.exception("unhandled error")
        return jsonify({'error': 'Internal server error', 'success': False}), 500

    def _generate_response(base_string, amount):
        result = service.generate(base_string, amount)
        return jsonify({
            'qris_string': result.final_payload,
            'amount': _json_amount(result.amount),
            'formatted_amount': format_rupiah(result.amount),
            'crc': result.crc,
            'artifact_id': result.artifact_id,
            'download_url': url_for('download', artifact_id=result.artifact_id),
            'expires_in': service.cache.ttl,
            'qr_image': to_data_url(result.image),
            'success': True
        })

    @app.route('/health', methods=['GET'])
    def health_check():
        """Health check endpoint"""
        return jsonify({'status': 'ok', 'service': 'qris-calculator'})

    @app.route('/generate-qris', methods=['POST'])
    def generate_qris():
        """
        Generate dynamic QRIS string with CRC16 calculation

        Request body:
        {
            "base_string": "00020101021126570011...6304ABCD",
            "amount": 50000
        }

        Response:
        {
            "qris_string": "complete QRIS string with CRC",
            "amount": 50000,
            "crc": "ABCD",
            "artifact_id": "...",
            "download_url": "/download/..."
        }
        """
        data = request.get_json(silent=True)
        if not data or not isinstance(data, dict):
            raise MissingInput('No data provided')
        return _generate_response(data.get('base_string'), data.get('amount'))

    @app.route('/api/create', methods=['GET'])
    def create_from_query():
        """Query-string variant: /api/create?qrisCode=...&amount=..."""
        qris_code = request.args.get('qrisCode')
        amount = request.args.get('amount')
        if not qris_code or not amount:
            raise MissingInput('Amount and QRIS code are required')
        return _generate_response(qris_code, amount)

    @app.route('/validate-qris', methods=['POST'])
    def validate_qris():
        """Validate QRIS string CRC"""
        data = request.get_json(silent=True) or {}
        qris_string = data.get('qris_string') if isinstance(data, dict) else None

        if not isinstance(qris_string, str) or len(qris_string) < 4:
            raise MissingInput('Invalid QRIS string')

        # Extract CRC from last 4 characters
        provided_crc = qris_string[-4:]
        calculated_crc = checksum(qris_string[:-4])

        return jsonify({
            'valid': provided_crc.upper() == calculated_crc,
            'provided_crc': provided_crc,
            'calculated_crc': calculated_crc
        })

    @app.route('/download/<artifact_id>', methods=['GET'])
    def download(artifact_id):
        image = service.resolve(artifact_id)
        return send_file(
            io.BytesIO(image),
            mimetype='image/png',
            download_name=f'qris-{artifact_id}.png',
        )

    return app
