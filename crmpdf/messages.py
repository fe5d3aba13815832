"""Textes affichés à l'utilisateur, indexés par clé (format `str.format`)."""

from typing import Any, Mapping

MESSAGES: Mapping[str, str] = {
    "commandDescription": "Generate a PDF document from CRM records merged into an HTML template.",
    "usernameFlagDescription": "username or alias of the org to query",
    "templateFlagDescription": "template file name, relative to the template directory",
    "templateDirFlagDescription": "directory containing the template and its assets",
    "outputFlagDescription": "path of the PDF file to write",
    "sobjectFlagDescription": "label under which the inline query record is made available to the template",
    "queryFlagDescription": "inline query; the first record is rendered under the sobject label",
    "queryFileFlagDescription": "JSON file of named queries: {label: {query, single}}",
    "allowEmptyFlagDescription": "render the template without data when no query is given",
    "errorQueryAndSObjectOrQueriesRequired": "The queries flag may not be used with query or sobject name",
    "queryRequiresSObject": "The query and sobject name must both be specified",
    "errorNoContentSource": (
        "No content source specified: use --query with --sobject, --query-file, or --allow-empty"
    ),
    "errorNoQueryRecords": "No records returned for query: {0}",
    "errorMalformedQueryFile": "Malformed query file {0}: {1}",
    "errorConnection": "Unable to connect as {0}: {1}",
    "errorQueryFailed": "Query failed: {0} ({1})",
    "errorTemplateRender": "Unable to render template {0}: {1}",
    "errorBrowserLaunch": "Unable to launch the browser: {0}",
    "errorNavigationTimeout": "Page did not settle while loading {0}: {1}",
    "errorPdfExport": "Unable to export the page as PDF: {0}",
    "errorOutputWrite": "Unable to write PDF file {0}: {1}",
    "errorWorkspace": "Unable to copy template directory {0}: {1}",
    "errorConfiguration": "Invalid configuration value {0}={1!r}: {2}",
    "successMessage": "PDF file successfully written to {0}",
}


def get_message(key: str, *args: Any, messages: Mapping[str, str] = MESSAGES) -> str:
    return messages[key].format(*args)
