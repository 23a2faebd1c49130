import logging

from flask import Blueprint, Flask, Response, current_app, request
from werkzeug.exceptions import HTTPException

from config import Config
from errors import InternalError, ManifestError, NotFoundError, UpstreamError, ValidationError
from manifest_store import UnavailableRecordStore, connect_store
from plist_manifest import build_plist

PLIST_CONTENT_TYPE = 'application/x-plist'
TEXT_CONTENT_TYPE = 'text/plain; charset=utf-8'
METHODS = ['GET', 'POST', 'PUT', 'PATCH', 'DELETE', 'TRACE']

MISSING_PARAMS = 'Error: Missing required query parameters (ipaUrl, bundleId, version, appName).'
NOT_HTTPS = 'Error: ipaUrl must use HTTPS scheme.'
GENERATION_FAILED = 'Internal Server Error during PLIST generation.'
MISSING_ID = 'Error: Missing required query parameter "id".'
NOT_FOUND = 'Error: Manifest data not found for ID: %s'
LOOKUP_FAILED = 'Internal Server Error while fetching or generating PLIST.'

bp = Blueprint('manifest', __name__)


def text_response(message, status):
    return Response(message, status=status, content_type=TEXT_CONTENT_TYPE)


def plist_response(body):
    return Response(body, status=200, content_type=PLIST_CONTENT_TYPE)


@bp.route('/api/manifest', methods=METHODS)
def manifest_from_query():
    ipa_url = request.args.get('ipaUrl')
    bundle_id = request.args.get('bundleId')
    version = request.args.get('version')
    app_name = request.args.get('appName')

    if not (ipa_url and bundle_id and version and app_name):
        raise ValidationError(MISSING_PARAMS)
    # iOS refuses to install packages served over plain http
    if not ipa_url.startswith('https://'):
        raise ValidationError(NOT_HTTPS)

    try:
        body = build_plist(ipa_url, bundle_id, version, app_name)
    except Exception as e:
        raise InternalError(GENERATION_FAILED) from e
    return plist_response(body)


@bp.route('/api/manifest/lookup', methods=METHODS)
def manifest_from_store():
    record_id = request.args.get('id')
    if not record_id:
        raise ValidationError(MISSING_ID)

    store = current_app.extensions['manifest_store']
    try:
        record = store.fetch(record_id)
        body = record.to_plist() if record is not None else None
    except Exception as e:
        raise InternalError(LOOKUP_FAILED) from e

    if body is None:
        raise NotFoundError(NOT_FOUND % record_id)
    return plist_response(body)


@bp.route('/healthz')
def healthz():
    if current_app.extensions.get('manifest_store_error'):
        return text_response('ok\nstore: unavailable', 200)
    return text_response('ok', 200)


@bp.app_errorhandler(ManifestError)
def handle_manifest_error(e):
    if e.status >= 500:
        current_app.logger.error('%s %s failed', request.method, request.path, exc_info=e)
    return text_response(e.message, e.status)


@bp.app_errorhandler(HTTPException)
def handle_http_error(e):
    response = text_response('Error: %s %s' % (e.code, e.name), e.code)
    if e.code == 405 and e.valid_methods:
        response.headers['Allow'] = ', '.join(e.valid_methods)
    return response


@bp.after_app_request
def allow_any_origin(response):
    # installers fetch the manifest through a redirect chain with no origin
    response.headers['Access-Control-Allow-Origin'] = '*'
    return response


def create_app(config=None, store=None):
    config = config or Config.from_env()
    app = Flask(__name__)
    app.logger.setLevel(config.log_level)
    app.config['MANIFEST'] = config

    store_error = None
    if store is None:
        result = connect_store(config)
        if result.ok:
            store = result.store
        elif config.store_required:
            app.logger.error('Record store is required but failed to start: %s', result.error)
            raise UpstreamError(result.error)
        else:
            app.logger.warning('Record store unavailable, lookups will fail: %s', result.error)
            store_error = result.error
            store = UnavailableRecordStore(result.error)

    app.extensions['manifest_store'] = store
    app.extensions['manifest_store_error'] = store_error
    app.register_blueprint(bp)
    return app


if __name__ == "__main__":
    config = Config.from_env()
    logging.basicConfig(level=config.log_level)
    create_app(config).run(host="0.0.0.0", port=config.port)
