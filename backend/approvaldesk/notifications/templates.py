"""HTML email rendering for workflow notifications."""

from dataclasses import dataclass

from jinja2 import DictLoader, Environment, select_autoescape

from approvaldesk.notifications.events import RequestCreatedEvent, StatusChangedEvent

_TEMPLATES = {
    "request_created.html": """\
<html>
  <body>
    <p>Hello {{ approver_name }},</p>
    <p>{{ creator_name }} submitted a new request that needs your approval.</p>
    <table>
      <tr><td><b>Request</b></td><td>{{ request_title }}</td></tr>
      <tr><td><b>Type</b></td><td>{{ request_type }}</td></tr>
      <tr><td><b>Description</b></td><td>{{ request_description or "" }}</td></tr>
      <tr><td><b>Submitted</b></td><td>{{ created_at }}</td></tr>
      <tr><td><b>Reference</b></td><td>{{ request_id }}</td></tr>
    </table>
  </body>
</html>
""",
    "request_status_update.html": """\
<html>
  <body>
    <p>Hello {{ creator_name }},</p>
    {% if is_approved %}
    <p>Your request <b>{{ request_title }}</b> was approved by {{ action_performer_name }}.</p>
    {% else %}
    <p>Your request <b>{{ request_title }}</b> was rejected by {{ action_performer_name }}.</p>
    {% endif %}
    <p><b>Status:</b> {{ request_status }}</p>
    <p><b>Comments:</b> {{ comments }}</p>
    <p><b>Reference:</b> {{ request_id }}</p>
  </body>
</html>
""",
}

_env = Environment(loader=DictLoader(_TEMPLATES), autoescape=select_autoescape(["html"]))

CREATED_AT_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class EmailMessage:
    to: str
    subject: str
    html: str


def render_request_created(event: RequestCreatedEvent, to: str) -> EmailMessage:
    html = _env.get_template("request_created.html").render(
        approver_name=event.approver_name,
        request_id=event.request_id,
        request_title=event.title,
        request_description=event.description,
        request_type=event.type_name,
        creator_name=event.requester_name,
        created_at=event.created_at.strftime(CREATED_AT_FORMAT),
    )
    return EmailMessage(to=to, subject=f"New Approval Request: {event.title}", html=html)


def render_status_update(event: StatusChangedEvent, to: str) -> EmailMessage:
    html = _env.get_template("request_status_update.html").render(
        creator_name=event.requester_name,
        request_id=event.request_id,
        request_title=event.title,
        request_status=event.status,
        action_performer_name=event.acting_user_name,
        comments=event.comments,
        is_approved=event.is_approved,
    )
    verdict = "Approved" if event.is_approved else "Rejected"
    return EmailMessage(to=to, subject=f"Request {verdict}: {event.title}", html=html)
