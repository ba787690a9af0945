from django.conf import settings
from django.http import JsonResponse, StreamingHttpResponse
from django.views.decorators.http import require_POST
from django.views.decorators.csrf import csrf_exempt
import json
import logging
from .nfa_simulation import run_nfa
from .regex_compiler import compile_regex
from .serializers import compiled_regex_to_dict

logger = logging.getLogger(__name__)

DEFAULT_MAX_REGEX_LENGTH = 1000
DEFAULT_MAX_INPUT_LENGTH = 10000


def _max_regex_length() -> int:
    return getattr(settings, 'REGEX_VISUALIZER_MAX_REGEX_LENGTH', DEFAULT_MAX_REGEX_LENGTH)


def _max_input_length() -> int:
    return getattr(settings, 'REGEX_VISUALIZER_MAX_INPUT_LENGTH', DEFAULT_MAX_INPUT_LENGTH)


def _get_regex(data: dict) -> str:
    """Extract and check the regex parameter, raising ValueError when unusable."""
    if not isinstance(data, dict):
        raise ValueError('Request body must be a JSON object')
    regex = data.get('regex')
    if regex is None:
        raise ValueError('Missing regex parameter')
    if not isinstance(regex, str):
        raise ValueError('regex must be a string')
    if len(regex) > _max_regex_length():
        raise ValueError(f'regex is longer than {_max_regex_length()} characters')
    return regex


def _get_input(data: dict) -> str:
    input_string = data.get('input', '')
    if not isinstance(input_string, str):
        raise ValueError('input must be a string')
    if len(input_string) > _max_input_length():
        raise ValueError(f'input is longer than {_max_input_length()} characters')
    return input_string


def _bad_request(error: ValueError) -> JsonResponse:
    logger.warning("Rejected regex request: %s", error)
    return JsonResponse({'error': str(error)}, status=400)


def _server_error(error: Exception) -> JsonResponse:
    logger.exception("Regex request failed")
    return JsonResponse({'error': f'Server error: {str(error)}'}, status=500)


@csrf_exempt
@require_POST
def compile_regex_view(request):
    """
    Django view to compile a regex for display.

    Expects a POST request with a JSON body containing:
    - regex: The regular expression, valid or not

    Returns the lexemes, RPN tokens, NFA summary, graph layout, warnings and
    the autofixed regex. Malformed regexes still compile; their defects are
    reported in 'warnings'.
    """
    try:
        data = json.loads(request.body)
        regex = _get_regex(data)

        compiled = compile_regex(regex)
        return JsonResponse(compiled_regex_to_dict(compiled))

    except ValueError as e:
        return _bad_request(e)
    except Exception as e:
        return _server_error(e)


@csrf_exempt
@require_POST
def token_info(request):
    """
    Django view describing the lexeme at an index of a regex.

    Expects a POST request with a JSON body containing:
    - regex: The regular expression
    - index: Index of the lexeme (integer)
    """
    try:
        data = json.loads(request.body)
        regex = _get_regex(data)
        index = data.get('index')

        if index is None:
            return JsonResponse({'error': 'Missing index parameter'}, status=400)

        try:
            index = int(index)
        except (ValueError, TypeError):
            return JsonResponse({'error': 'index must be an integer'}, status=400)

        compiled = compile_regex(regex)
        return JsonResponse(compiled.get_token_info(index))

    except ValueError as e:
        return _bad_request(e)
    except Exception as e:
        return _server_error(e)


@csrf_exempt
@require_POST
def simulate_regex(request):
    """
    Django view running one step of a regex simulation.

    Expects a POST request with a JSON body containing:
    - regex: The regular expression
    - input: The test string
    - current: Node indexes to test (the 'next_nodes' of the previous
      step). When absent, the run is initialized instead.
    - position: Index of the symbol to consume (default 0)

    Returns a JSON response with the run state, the matching and next node
    indexes, and the run classes of the graph nodes.
    """
    try:
        data = json.loads(request.body)
        regex = _get_regex(data)
        input_string = _get_input(data)
        current = data.get('current')

        compiled = compile_regex(regex)

        if current is None:
            run_step = compiled.init()
        else:
            try:
                position = int(data.get('position', 0))
            except (ValueError, TypeError):
                return JsonResponse({'error': 'position must be an integer'}, status=400)

            if position < 0:
                return JsonResponse({'error': 'position must not be negative'}, status=400)

            if not isinstance(current, list):
                return JsonResponse({'error': 'current must be a list of node indexes'}, status=400)

            try:
                indexes = [int(index) for index in current]
            except (ValueError, TypeError):
                return JsonResponse({'error': 'current must be a list of node indexes'}, status=400)

            if any(index < 0 or index >= len(compiled.nfa) for index in indexes):
                return JsonResponse({'error': 'current contains an unknown node index'}, status=400)

            current_nodes = [compiled.nfa[index] for index in indexes]
            if any(node.match is None for node in current_nodes):
                return JsonResponse({'error': 'current must only contain value nodes'}, status=400)

            run_step = compiled.step(current_nodes, input_string, position)

        compiled.highlight(run_step)

        result = run_step.to_dict()
        result['graph_run_classes'] = [node.run_classes for node in compiled.graph.nodes]
        return JsonResponse(result)

    except ValueError as e:
        return _bad_request(e)
    except Exception as e:
        return _server_error(e)


@csrf_exempt
@require_POST
def simulate_regex_stream(request):
    """
    Django view streaming a whole regex simulation.
    Returns one Server-Sent Event per step, then an end-of-stream marker.
    """
    try:
        data = json.loads(request.body)
        regex = _get_regex(data)
        input_string = _get_input(data)

        compiled = compile_regex(regex)

        def result_generator():
            """Generator to stream the simulation steps as Server-Sent Events"""
            try:
                for position, run_step in enumerate(run_nfa(compiled.nfa, input_string)):
                    result = run_step.to_dict()
                    # The initial step consumes no symbol
                    result['position'] = position - 1
                    yield f"data: {json.dumps(result)}\n\n"

                # Send end-of-stream marker
                yield f"data: {json.dumps({'type': 'end'})}\n\n"

            except Exception as e:
                logger.exception("Regex simulation stream failed")
                yield f"data: {json.dumps({'type': 'error', 'message': str(e)})}\n\n"

        response = StreamingHttpResponse(result_generator(), content_type='text/event-stream')
        response['Cache-Control'] = 'no-cache'
        response['X-Accel-Buffering'] = 'no'  # Disable nginx buffering
        return response

    except ValueError as e:
        logger.warning("Rejected regex stream request: %s", e)
        message = str(e)

        def error_generator():
            yield f"data: {json.dumps({'error': message})}\n\n"

        return StreamingHttpResponse(
            error_generator(),
            content_type='text/event-stream',
            status=400
        )
    except Exception as e:
        logger.exception("Regex stream request failed")
        message = f'Server error: {str(e)}'

        def error_generator():
            yield f"data: {json.dumps({'error': message})}\n\n"

        return StreamingHttpResponse(
            error_generator(),
            content_type='text/event-stream',
            status=500
        )
