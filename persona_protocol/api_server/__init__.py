"""
API server package: HTTP/REST interface.

Exposes wallet persona analysis to clients. Validates request bodies and
delegates to the analysis engine; holds no state between requests.
"""
