from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail
from flask import current_app

RESULT_SUBJECT = "Your FitScore evaluation result"


def render_result(name, classification):
    return f"Hello {name}, the result of your evaluation is: {classification}."


def send_result(to_email, name, classification):
    """Tell a candidate their classification.

    Without SENDGRID_API_KEY the email is only written to the log. Errors
    from SendGrid propagate to the caller.
    """
    body = render_result(name, classification)
    api_key = current_app.config.get('SENDGRID_API_KEY')
    if not api_key:
        current_app.logger.info('Simulated email to=%s subject=%r body=%r', to_email, RESULT_SUBJECT, body)
        return None, None

    sg = SendGridAPIClient(api_key=api_key)
    message = Mail(from_email=(current_app.config['MAIL_FROM'], current_app.config['MAIL_FROM_NAME']),
                   to_emails=to_email,
                   subject=RESULT_SUBJECT,
                   html_content=f"<p>{body}</p>")
    resp = sg.send(message)
    return resp.status_code, getattr(resp, 'headers', None)
