from rest_framework.response import Response


def first_error(errors) -> str:
    """Premier message d'erreur lisible d'un serializer DRF (dict/list imbriqués)."""
    if isinstance(errors, dict):
        for value in errors.values():
            return first_error(value)
    if isinstance(errors, (list, tuple)):
        for value in errors:
            return first_error(value)
    return str(errors) if errors else "Invalid request"


def error_response(message: str, status: int, **extra) -> Response:
    return Response({"error": message, **extra}, status=status)
