from typing import Annotated

from fastapi import Depends

from quote_relay.handler import QuoteRequestHandler, quote_handler


def get_quote_handler() -> QuoteRequestHandler:
    return quote_handler


QuoteHandler = Annotated[QuoteRequestHandler, Depends(get_quote_handler)]
