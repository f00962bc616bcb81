class IntegrationType:
    """
    Enum for integration kinds.
    """

    ARTICLE = "article"
    SOCIAL = "social"

    @classmethod
    def choices(cls):
        return [
            getattr(cls, attr)
            for attr in dir(cls)
            if not attr.startswith("__") and not callable(getattr(cls, attr))
        ]
