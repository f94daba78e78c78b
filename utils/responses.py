# utils/responses.py

from flask import request, jsonify

DEFAULT_PER_PAGE = 15
MAX_PER_PAGE = 100


def get_payload():
    """JSON body, falling back to form data; the query string is never read"""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    if request.form:
        return request.form.to_dict()
    return {}


def pagination_args():
    page = max(request.args.get('page', 1, type=int) or 1, 1)
    per_page = request.args.get('per_page', DEFAULT_PER_PAGE, type=int) or DEFAULT_PER_PAGE
    return page, min(max(per_page, 1), MAX_PER_PAGE)


def paginated(pagination, serializer):
    return {
        'items': [serializer(item) for item in pagination.items],
        'current_page': pagination.page,
        'per_page': pagination.per_page,
        'total': pagination.total,
        'last_page': max(pagination.pages, 1),
    }


def success(data=None, message=None, status=200, **extra):
    body = {'success': True}
    if message is not None:
        body['message'] = message
    if data is not None:
        body['data'] = data
    body.update(extra)
    return jsonify(body), status
