# utils/email.py
import requests
import os

BREVO_KEY = os.getenv("BREVO_API_KEY")
BREVO_URL = "https://api.brevo.com/v3/smtp/email"
SENDER = {"name": "CondoEase Maintenance", "email": "noreply@condoease.me"}


def _html_body(message: str) -> str:
     paragraphs = "".join(f"<p>{block.replace(chr(10), '<br>')}</p>" for block in message.split("\n\n"))
     return f"<div style='font-family:sans-serif'>{paragraphs}</div>"


def send_notification_email(to_email: str, subject: str, message: str):
     """Deliver a maintenance notification by email through Brevo."""
     api_key = os.getenv("BREVO_API_KEY", BREVO_KEY)
     if not api_key:
          raise Exception("BREVO_API_KEY is not set")

     response = requests.post(
          BREVO_URL,
          headers={
               "api-key": api_key,
               "Content-Type": "application/json",
          },
          json={
               "sender": SENDER,
               "to": [{"email": to_email}],
               "subject": subject,
               "htmlContent": _html_body(message),
               "textContent": message,
          },
          timeout=10,
     )
     if response.status_code not in (200, 201):
          raise Exception(f"Brevo error: {response.text}")
