"""
Default values for the emulated API Gateway context.

Every value here is a fixed, documented stand-in for data a live gateway would
supply. They only fill fields the caller's context JSON leaves out, so that
template output stays reproducible between runs.
"""

CONTEXT_DEFAULTS = {
    "accountId": "123456789012",
    "apiId": "abc123def4",
    "requestId": "test-request-id",
    "extendedRequestId": "test-extended-request-id",
    "awsEndpointRequestId": "test-aws-endpoint-request-id",
    "httpMethod": "GET",
    "stage": "test",
    "deploymentId": "deployment-123",
    "domainName": "abc123def4.execute-api.us-east-1.amazonaws.com",
    "domainPrefix": "abc123def4",
    "path": "/test/resource",
    "protocol": "HTTP/1.1",
    "resourceId": "resource-123",
    "resourcePath": "/resource",
    "wafResponseCode": "WAF_ALLOW",
    "webaclArn": (
        "arn:aws:wafv2:us-east-1:123456789012:regional/webacl/test-webacl/"
        "12345678-1234-1234-1234-123456789012"
    ),
}

IDENTITY_DEFAULTS = {
    "accountId": "123456789012",
    "apiKey": None,
    "apiKeyId": None,
    "caller": "AIDACKCEVSQ6C2EXAMPLE",
    "cognitoAuthenticationProvider": (
        "cognito-idp.us-east-1.amazonaws.com/us-east-1_example,"
        "cognito-idp.us-east-1.amazonaws.com/us-east-1_example:CognitoSignIn:user123"
    ),
    "cognitoAuthenticationType": "authenticated",
    "cognitoIdentityId": "us-east-1:12345678-1234-1234-1234-123456789012",
    "cognitoIdentityPoolId": "us-east-1:12345678-1234-1234-1234-123456789012",
    "principalOrgId": "o-1234567890",
    "sourceIp": "192.0.2.1",
    "user": "AIDACKCEVSQ6C2EXAMPLE",
    "userAgent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
    "userArn": "arn:aws:iam::123456789012:user/example-user",
    "vpcId": "vpc-12345678",
    "vpceId": "vpce-12345678",
}

CLIENT_CERT_DEFAULTS = {
    "clientCertPem": (
        "-----BEGIN CERTIFICATE-----\n"
        "MIIDXTCCAkWgAwIBAgIJAKoK/OvK5tYzMA0GCSqGSIb3DQEBCwUAMEUxCzAJBgNV\n"
        "-----END CERTIFICATE-----"
    ),
    "subjectDN": "CN=example.com, O=Example Corp, C=US",
    "issuerDN": "CN=Example CA, O=Example Corp, C=US",
    "serialNumber": "1234567890123456789012345678901234567890",
}

VALIDITY_DEFAULTS = {
    "notBefore": "Jan 01 00:00:00 2023 GMT",
    "notAfter": "Jan 01 00:00:00 2024 GMT",
}

DEFAULT_PRINCIPAL_ID = "user123"

# Simulated custom authorizer output, consulted after the caller's own map
AUTHORIZER_DEFAULTS = {
    "key": "value",
    "numKey": 1,
    "boolKey": True,
    "user_id": "12345",
    "scope": "read write",
}

ERROR_DEFAULTS = {
    "message": "Internal server error",
    "messageString": '"Internal server error"',
    "responseType": "DEFAULT_5XX",
    "validationErrorString": "Validation error: Invalid parameter value",
}

REQUEST_OVERRIDE_HEADERS = {
    "Content-Type": "application/json",
    "Authorization": "Bearer override-token",
}

REQUEST_OVERRIDE_PATHS = {
    "id": "override-id",
    "version": "v2",
}

REQUEST_OVERRIDE_QUERYSTRINGS = {
    "filter": "override-filter",
    "sort": "desc",
}

RESPONSE_OVERRIDE_STATUS = "200"

RESPONSE_OVERRIDE_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Custom-Header": "override-value",
}
