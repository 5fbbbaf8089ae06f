import smtplib
from email.message import EmailMessage

from dailytask.errors import DeliveryFailure


class SmtpMailer:
    def __init__(self, host, port, username=None, password=None, sender=None, use_tls=True, timeout=10.0):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender
        self.use_tls = use_tls
        self.timeout = timeout

    @classmethod
    def from_config(cls, config):
        return cls(
            host=config["EMAIL_HOST"],
            port=config["EMAIL_PORT"],
            username=config["EMAIL_USER"],
            password=config["EMAIL_PASS"],
            sender=config["EMAIL_FROM"],
            use_tls=config["EMAIL_USE_TLS"],
            timeout=config["EMAIL_TIMEOUT_SECONDS"],
        )

    def send(self, to_email: str, subject: str, html: str):
        msg = EmailMessage()
        msg["Subject"] = subject
        if self.sender:
            msg["From"] = self.sender
        msg["To"] = to_email
        msg.set_content("This message requires an HTML capable mail client.")
        msg.add_alternative(html, subtype="html")

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls()
                if self.username:
                    server.login(self.username, self.password or "")
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            raise DeliveryFailure(details=str(exc)) from exc


def send_reset_code(mailer, to_email: str, code: str, ttl_seconds: int):
    minutes = max(1, ttl_seconds // 60)
    html = f"""
        <h2>Password Reset Request</h2>
        <p>Your OTP for password reset is: <strong>{code}</strong></p>
        <p>This OTP will expire in {minutes} minutes.</p>
    """
    mailer.send(to_email, "Password Reset OTP", html)
