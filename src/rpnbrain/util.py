from functools import wraps


class RPNError(Exception):
    pass


def wrap_user_errors(fmt):
    '''
    Decorator that turns unexpected exceptions into RPNErrors.

    The message is fmt formatted with the call's arguments. Passes through
    RPNErrors untouched.
    '''
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except RPNError:
                raise
            except Exception as e:
                raise RPNError(fmt.format(*args, **kwargs), e) from e
        return wrapper
    return decorator


def format_general(number):
    '''
    Compact rendering for descriptions: %g, no trailing zeros.
    '''
    return '{:g}'.format(number)


def format_exact(number):
    '''
    Shortest text that parses back to the very same float.

    Drops the pointless trailing '.0' of integral values.
    '''
    text = repr(float(number))
    if text.endswith('.0'):
        text = text[:-2]
    return text
