DEFAULT_TEXTS = {
    'placeholders.default': '-',
    'label_create': 'Create',
}


class I18n:
    """Translation and locale provider used by the widget templates."""

    def __init__(self, locale: str = 'en', texts: dict = None):
        self.locale = locale
        self.texts = {**DEFAULT_TEXTS, **(texts or {})}

    def t(self, key: str, default: str = None) -> str:
        return self.texts.get(key, default if default is not None else key)
