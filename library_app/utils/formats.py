"""Response format negotiation for HTML pages.

A request either wants a full page (redirect / render) or a Turbo Stream
fragment that replaces one element of the current page.
"""
from flask import render_template, request, make_response

TURBO_STREAM = "text/vnd.turbo-stream.html"


def wants_stream() -> bool:
    if request.args.get("format") == "turbo_stream":
        return True
    # only an explicit mention counts; */* alone means a full page
    return any(mimetype == TURBO_STREAM for mimetype, _q in request.accept_mimetypes)


def render_stream(target: str, template: str, status: int = 200, action: str = "replace", **context):
    """Render ``template`` wrapped in a <turbo-stream> element."""
    body = render_template("shared/stream.html", action=action, target=target,
                           content=render_template(template, **context))
    response = make_response(body, status)
    response.mimetype = TURBO_STREAM
    return response
