import re


VARIANTS = ("type1", "type2")


def check_backend_attr(backend, required_attr):
    """Check whether ``backend`` implements the dense primitives.

    Parameters
    ----------
    backend : object
        The backend instance to check.

    required_attr : List or tuple of strings
        The methods that ``backend`` must have.

    Raises
    ------
        AttributeError
            if any of the attribute in ``required_attr`` is missing
            from ``backend`` attributes or is not callable.
    """
    missing_attrs = [f"`{attr}`" for attr in required_attr
                     if not callable(getattr(backend, attr, None))]

    if len(missing_attrs):
        # get name of the backend class
        name_matcher = re.compile(r"\.?(\w+)'>")
        backend_name = name_matcher.search(str(backend.__class__)).group(1)

        raise AttributeError(
            f"{backend_name} cannot be used as a linear algebra backend. "
            f"It must implement {' and '.join(f'`{a}`' for a in required_attr)}.\n"
            f"Missing {' and '.join(missing_attrs)}."
        )


def check_variant(variant):
    """Normalize the Anderson acceleration variant.

    Parameters
    ----------
    variant : {'type1', 'type2'} or bool
        Variant name. A boolean is understood as "is type-1".

    Returns
    -------
    type1 : bool
        ``True`` for the type-1 variant, ``False`` for type-2.

    Raises
    ------
    ValueError
        if ``variant`` is an unknown name.
    """
    if isinstance(variant, bool):
        return variant
    if variant not in VARIANTS:
        raise ValueError(
            f"Unknown Anderson acceleration variant. Expected one of "
            f"{VARIANTS} or a bool. Got {variant!r}")
    return variant == "type1"
