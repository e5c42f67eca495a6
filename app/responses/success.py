from .base import build_response


def success_response(message: str = None, data=None, meta: dict = None):
    return build_response(200, message=message, data=data, meta=meta)


def data_response(data=None, meta: dict = None):
    return build_response(200, data=data, meta=meta)


def created_response(message: str = None, data=None):
    return build_response(201, message=message, data=data)


def empty_response():
    return build_response(204)
