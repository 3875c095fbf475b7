from smartsearch.bot.middlewares.locale import LocaleMiddleware

__all__ = ["LocaleMiddleware"]
