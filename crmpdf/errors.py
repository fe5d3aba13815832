from typing import Any, Mapping, Optional

from .messages import MESSAGES, get_message


class CrmPdfError(RuntimeError):
    """
    Erreur terminale du pipeline : aucune n'est rattrapée ni rejouée en interne,
    seule la CLI les intercepte pour afficher le message et sortir en code 1.
    """

    name = "CrmPdfError"
    message_key: Optional[str] = None

    @classmethod
    def from_messages(cls, *args: Any, messages: Mapping[str, str] = MESSAGES) -> "CrmPdfError":
        if cls.message_key is None:
            raise TypeError(f"{cls.__name__} n'a pas de clé de message")
        return cls(get_message(cls.message_key, *args, messages=messages))


class ConflictingModes(CrmPdfError):
    name = "ConflictingModes"
    message_key = "errorQueryAndSObjectOrQueriesRequired"


class IncompleteInlineQuery(CrmPdfError):
    name = "IncompleteInlineQuery"
    message_key = "queryRequiresSObject"


class NoContentSourceSpecified(CrmPdfError):
    name = "NoContentSourceSpecified"
    message_key = "errorNoContentSource"


class MalformedBatchFile(CrmPdfError):
    name = "MalformedBatchFile"
    message_key = "errorMalformedQueryFile"


class EmptyResultSet(CrmPdfError):
    name = "EmptyResultSet"
    message_key = "errorNoQueryRecords"

    def __init__(self, message: str, query: Optional[str] = None) -> None:
        super().__init__(message)
        self.query = query

    @classmethod
    def for_query(cls, query: str, messages: Mapping[str, str] = MESSAGES) -> "EmptyResultSet":
        return cls(get_message(cls.message_key, query, messages=messages), query=query)


class ConnectionFailed(CrmPdfError):
    name = "ConnectionFailed"
    message_key = "errorConnection"


class QueryFailed(CrmPdfError):
    name = "QueryFailed"
    message_key = "errorQueryFailed"


class TemplateRenderError(CrmPdfError):
    name = "TemplateRenderError"
    message_key = "errorTemplateRender"


class BrowserLaunchFailed(CrmPdfError):
    name = "BrowserLaunchFailed"
    message_key = "errorBrowserLaunch"


class NavigationTimeout(CrmPdfError):
    name = "NavigationTimeout"
    message_key = "errorNavigationTimeout"


class PdfExportFailed(CrmPdfError):
    name = "PdfExportFailed"
    message_key = "errorPdfExport"


class OutputWriteFailed(CrmPdfError):
    name = "OutputWriteFailed"
    message_key = "errorOutputWrite"


class WorkspaceFailed(CrmPdfError):
    name = "WorkspaceFailed"
    message_key = "errorWorkspace"


class ConfigurationError(CrmPdfError):
    name = "ConfigurationError"
    message_key = "errorConfiguration"
