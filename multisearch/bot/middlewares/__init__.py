from multisearch.bot.middlewares.session import SearchSessionMiddleware

__all__ = ["SearchSessionMiddleware"]
