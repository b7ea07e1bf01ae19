from rest_framework.views import exception_handler


def _first_message(data) -> str:
    if isinstance(data, dict):
        for value in data.values():
            return _first_message(value)
        return "Invalid request."
    if isinstance(data, (list, tuple)):
        return _first_message(data[0]) if data else "Invalid request."
    return str(data)


def api_exception_handler(exc, context):
    """Render handled API errors as ``{"success": false, "message": ...}``."""
    response = exception_handler(exc, context)
    if response is None:
        return None

    data = response.data
    if isinstance(data, dict) and "detail" in data:
        payload = {"success": False, "message": str(data["detail"])}
    else:
        payload = {
            "success": False,
            "message": _first_message(data),
            "errors": data,
        }
    response.data = payload
    return response
