from captionsync.config import T, E

_API_CALLS = {}

TRACKED_CALLS = (
    'auth.api_key',
    'auth.refresh',
    'captions.list',
    'captions.delete',
    'captions.upload',
)

def record_api_call(api_call_name):
    """Counts one request against the hosting API for this session."""
    if api_call_name in TRACKED_CALLS:
        _API_CALLS[api_call_name] = _API_CALLS.get(api_call_name, 0) + 1

def get_api_call_count(api_call_name=None):
    """Returns the count for one call name, or the session total when no name is given."""
    if api_call_name is None:
        return sum(_API_CALLS.values())
    return _API_CALLS.get(api_call_name, 0)

def reset_usage():
    _API_CALLS.clear()

def display_usage(translator):
    """Prints the API calls made during the session."""
    print(translator.get('usage.report_header', T_HEADER=T.HEADER, E_REPORT=E.REPORT))
    for api_call_name in TRACKED_CALLS:
        count = _API_CALLS.get(api_call_name, 0)
        if count:
            print(translator.get('usage.report_line', api_call_name=api_call_name, count=count))
    print(translator.get('usage.report_total', total=get_api_call_count()))
    print(translator.get('usage.report_footer', T_HEADER=T.HEADER))
