"""
The $context namespace.

Projects the caller's context map onto the record API Gateway exposes to
mapping templates. Every field falls back to a fixed default from
config.defaults when the map leaves it out; only the request time is taken
from the clock.

The error record and the request/response override tables are emulation
stubs: they hold fixed sample values and do not reflect the actual request.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from dateutil import parser as date_parser

from ..config import defaults
from ..template.functions import to_text


# Function to get the current time - can be overridden in tests
_get_current_datetime: Callable[[], datetime] = lambda: datetime.now(timezone.utc)

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

# Common Log Format as used by $context.requestTime, e.g. 17/Oct/2026:10:15:00 +0000
_CLF_PREFIX = re.compile(r"^\d{1,2}/[A-Za-z]{3}/\d{4}:")


def _text(source: Mapping[str, Any], key: str, default: Optional[str]) -> Optional[str]:
    value = source.get(key)
    return default if value is None else to_text(value)


def _submap(source: Mapping[str, Any], key: str) -> Dict[str, Any]:
    value = source.get(key)
    return value if isinstance(value, dict) else {}


def format_request_time(moment: datetime) -> str:
    """
    Format a moment the way $context.requestTime shows it.

    Examples:
        2026-10-17 10:15:00 UTC -> '17/Oct/2026:10:15:00 +0000'
    """
    moment = moment.astimezone(timezone.utc)
    return (
        f"{moment.day:02d}/{_MONTHS[moment.month - 1]}/{moment.year}:"
        f"{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d} +0000"
    )


def parse_request_time(text: str) -> Optional[datetime]:
    """Parse a supplied request time (CLF or any format dateutil reads); None if unreadable."""
    if _CLF_PREFIX.match(text):
        # Separate the date from the time so dateutil can read it
        text = text.replace(":", " ", 1)
    try:
        moment = date_parser.parse(text)
    except (ValueError, OverflowError):
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def resolve_request_time(
    context: Mapping[str, Any],
    now: Optional[datetime] = None
) -> Tuple[str, int]:
    """
    Work out requestTime and requestTimeEpoch (milliseconds).

    A supplied value wins. When only one of the two is supplied, the other
    is derived from it; when neither is, both come from one clock reading.
    """
    supplied_time = context.get("requestTime")
    supplied_epoch = context.get("requestTimeEpoch")

    epoch: Optional[int] = None
    if supplied_epoch is not None:
        try:
            epoch = int(supplied_epoch)
        except (TypeError, ValueError):
            epoch = None

    moment: Optional[datetime] = None
    if supplied_time is not None:
        moment = parse_request_time(to_text(supplied_time))
    if moment is None and epoch is not None:
        try:
            moment = datetime.fromtimestamp(epoch / 1000, tz=timezone.utc)
        except (OverflowError, ValueError, OSError):
            moment = None
    if moment is None:
        moment = now or _get_current_datetime()

    request_time = to_text(supplied_time) if supplied_time is not None else format_request_time(moment)
    if epoch is None:
        epoch = int(moment.timestamp() * 1000)
    return request_time, epoch


@dataclass(frozen=True)
class Validity:
    notBefore: str
    notAfter: str


@dataclass(frozen=True)
class ClientCert:
    clientCertPem: str
    subjectDN: str
    issuerDN: str
    serialNumber: str
    validity: Validity


@dataclass(frozen=True)
class Identity:
    """$context.identity"""

    accountId: str
    apiKey: Optional[str]
    apiKeyId: Optional[str]
    caller: str
    cognitoAuthenticationProvider: str
    cognitoAuthenticationType: str
    cognitoIdentityId: str
    cognitoIdentityPoolId: str
    principalOrgId: str
    sourceIp: str
    user: str
    userAgent: str
    userArn: str
    vpcId: str
    vpceId: str
    clientCert: ClientCert


@dataclass(frozen=True)
class Authorizer:
    """
    $context.authorizer

    Custom keys ($context.authorizer.someKey) are looked up in the caller's
    authorizer map first, then in a fixed simulated authorizer output.
    claims always resolves to null, as it does on the gateway for
    non-Cognito authorizers.
    """

    principalId: str
    _values: Mapping[str, Any]
    claims: None = None

    def get(self, key: str) -> Optional[str]:
        if self._values.get(key) is not None:
            return to_text(self._values[key])
        if key in defaults.AUTHORIZER_DEFAULTS:
            return to_text(defaults.AUTHORIZER_DEFAULTS[key])
        return None

    def __getattr__(self, name: str) -> Optional[str]:
        # Only reached for names that are not regular attributes
        if name.startswith("_"):
            raise AttributeError(name)
        return self.get(name)


@dataclass(frozen=True)
class ErrorContext:
    """$context.error - a fixed stand-in for a generic 5XX gateway error."""

    message: str
    messageString: str
    responseType: str
    validationErrorString: str


@dataclass(frozen=True)
class RequestOverride:
    header: Mapping[str, str]
    path: Mapping[str, str]
    querystring: Mapping[str, str]


@dataclass(frozen=True)
class ResponseOverride:
    status: str
    header: Mapping[str, str]


@dataclass(frozen=True)
class ContextModel:
    """The full $context record for one evaluation."""

    accountId: str
    apiId: str
    requestId: str
    extendedRequestId: str
    awsEndpointRequestId: str
    httpMethod: str
    stage: str
    deploymentId: str
    domainName: str
    domainPrefix: str
    path: str
    protocol: str
    resourceId: str
    resourcePath: str
    requestTime: str
    requestTimeEpoch: int
    isCanaryRequest: bool
    wafResponseCode: str
    webaclArn: str
    identity: Identity
    authorizer: Authorizer
    error: ErrorContext
    requestOverride: RequestOverride
    responseOverride: ResponseOverride


def build_identity(context: Mapping[str, Any]) -> Identity:
    """Build $context.identity from the context map's "identity" object."""
    identity = _submap(context, "identity")
    cert = _submap(identity, "clientCert")
    validity = _submap(cert, "validity")

    client_cert = ClientCert(
        validity=Validity(**{
            key: _text(validity, key, default)
            for key, default in defaults.VALIDITY_DEFAULTS.items()
        }),
        **{
            key: _text(cert, key, default)
            for key, default in defaults.CLIENT_CERT_DEFAULTS.items()
        }
    )
    return Identity(
        clientCert=client_cert,
        **{
            key: _text(identity, key, default)
            for key, default in defaults.IDENTITY_DEFAULTS.items()
        }
    )


def build_authorizer(context: Mapping[str, Any]) -> Authorizer:
    """Build $context.authorizer from the context map's "authorizer" object."""
    values = _submap(context, "authorizer")
    principal_id = values.get("principalId")
    if principal_id is None:
        principal_id = context.get("principalId")
    return Authorizer(
        principalId=defaults.DEFAULT_PRINCIPAL_ID if principal_id is None else to_text(principal_id),
        _values=MappingProxyType(dict(values)),
    )


def build_context(context: Mapping[str, Any], now: Optional[datetime] = None) -> ContextModel:
    """
    Project a raw context map onto the $context record.

    Args:
        context: Parsed context JSON
        now: Evaluation time; defaults to the current UTC time

    Returns:
        A fresh ContextModel
    """
    fields = {
        key: _text(context, key, default)
        for key, default in defaults.CONTEXT_DEFAULTS.items()
    }
    # awsEndpointRequestId falls back to the supplied extendedRequestId before its own default
    if context.get("awsEndpointRequestId") is None and context.get("extendedRequestId") is not None:
        fields["awsEndpointRequestId"] = to_text(context["extendedRequestId"])

    request_time, request_epoch = resolve_request_time(context, now)
    canary = context.get("isCanaryRequest")

    return ContextModel(
        requestTime=request_time,
        requestTimeEpoch=request_epoch,
        isCanaryRequest=canary if isinstance(canary, bool) else False,
        identity=build_identity(context),
        authorizer=build_authorizer(context),
        error=ErrorContext(**defaults.ERROR_DEFAULTS),
        requestOverride=RequestOverride(
            header=MappingProxyType(dict(defaults.REQUEST_OVERRIDE_HEADERS)),
            path=MappingProxyType(dict(defaults.REQUEST_OVERRIDE_PATHS)),
            querystring=MappingProxyType(dict(defaults.REQUEST_OVERRIDE_QUERYSTRINGS)),
        ),
        responseOverride=ResponseOverride(
            status=defaults.RESPONSE_OVERRIDE_STATUS,
            header=MappingProxyType(dict(defaults.RESPONSE_OVERRIDE_HEADERS)),
        ),
        **fields
    )
