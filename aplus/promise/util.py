# -*- coding: utf-8 -*-


def is_thenable(value):
    """Check if an object can be chained, like a Promise, or is a "result".

    The promise module uses this function to differentiate "chainable" objects
    and direct return values, when using a callback who can returns both.
    It's a duck-typed test: any object with a callable `then` attribute is
    accepted, whatever the library who created it.

    Returns:
        boolean: True if the value has an attribute 'then' who is callable.
            False if not (None is never a thenable).
    """
    if value is None:
        return False
    return callable(getattr(value, 'then', None))
