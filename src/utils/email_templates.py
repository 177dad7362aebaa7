"""HTML templates for transactional emails."""

from html import escape

_BASE_STYLE = """
          body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
          .container { max-width: 600px; margin: 0 auto; padding: 20px; }
          .content { background: #ffffff; padding: 40px 30px; border-radius: 0 0 8px 8px; }
          .button { display: inline-block; background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); color: white; padding: 14px 30px; text-decoration: none; border-radius: 6px; font-weight: bold; margin: 20px 0; }
          .footer { text-align: center; padding: 20px; color: #666; font-size: 14px; }"""


def _layout(header_background: str, heading: str, body: str, footer: str, extra_style: str = "") -> str:
    return f"""
    <!DOCTYPE html>
    <html>
      <head>
        <meta charset="utf-8">
        <style>{_BASE_STYLE}
          .header {{ background: {header_background}; color: white; padding: 40px 20px; text-align: center; border-radius: 8px 8px 0 0; }}{extra_style}
        </style>
      </head>
      <body>
        <div class="container">
          <div class="header">
            <h1>{heading}</h1>
          </div>
          <div class="content">{body}
          </div>
          <div class="footer">
            <p>{footer}</p>
          </div>
        </div>
      </body>
    </html>
    """


def _greeting_name(name: str) -> str:
    return escape(name) if name else "there"


def build_welcome_email(name: str, discord_url: str) -> str:
    """Welcome email sent after a successful payment."""
    body = f"""
            <p>Hey {_greeting_name(name)}!</p>

            <p>Welcome to the community! Your membership has been activated and you now have full access to:</p>

            <ul>
              <li><strong>Live Trading Sessions</strong> - Watch Tom trade in real-time</li>
              <li><strong>1-on-1 Mentorship</strong> - Get personalized guidance</li>
              <li><strong>Exclusive Community</strong> - Connect with fellow traders</li>
              <li><strong>Premium Resources</strong> - Access all our trading materials</li>
            </ul>

            <p>Ready to get started?</p>

            <a href="{escape(discord_url, quote=True)}" class="button">Join Our Discord &rarr;</a>

            <p>If you have any questions, just reply to this email. We're here to help!</p>

            <p>Happy trading,<br><strong>Tom's Trading Room Team</strong></p>"""
    return _layout(
        "linear-gradient(135deg, #667eea 0%, #764ba2 100%)",
        "&#127881; Welcome to Tom's Trading Room!",
        body,
        "Tom's Trading Room | Elite Trading Mentorship",
    )


def build_refund_email(name: str, amount: str) -> str:
    """Refund confirmation with the formatted refund amount."""
    body = f"""
            <p>Hey {_greeting_name(name)},</p>

            <p>Your refund has been processed successfully.</p>

            <div class="info-box">
              <strong>Refund Amount:</strong> {escape(amount)}<br>
              <strong>Processing Time:</strong> 5-10 business days
            </div>

            <p>The refund will appear on your original payment method within 5-10 business days depending on your bank or card issuer.</p>

            <p><strong>What's next?</strong></p>
            <ul>
              <li>You'll receive a separate confirmation from your payment provider</li>
              <li>Your account access has been adjusted accordingly</li>
              <li>You're welcome to rejoin us anytime</li>
            </ul>

            <p>If you have any questions about this refund, just reply to this email.</p>

            <p>Thanks for giving us a try.</p>

            <p>Best regards,<br><strong>Tom's Trading Room Team</strong></p>"""
    return _layout(
        "#3b82f6",
        "&#128184; Refund Processed",
        body,
        "Tom's Trading Room | Customer Support",
        "\n          .info-box { background: #f3f4f6; padding: 20px; border-radius: 6px; margin: 20px 0; }",
    )


def build_membership_expired_email(name: str, reactivate_url: str) -> str:
    """Win-back email sent when a membership goes invalid."""
    body = f"""
            <p>Hey {_greeting_name(name)},</p>

            <p>We noticed your membership to Tom's Trading Room has expired.</p>

            <div class="highlight">
              <strong>&#9888;&#65039; Your access has ended</strong><br>
              You no longer have access to live sessions, mentorship calls, and community resources.
            </div>

            <p><strong>Want to continue your trading journey?</strong></p>

            <p>Reactivate your membership now to regain instant access to:</p>
            <ul>
              <li>Live trading sessions with Tom</li>
              <li>1-on-1 mentorship opportunities</li>
              <li>Exclusive community Discord</li>
              <li>Premium trading resources and strategies</li>
            </ul>

            <a href="{escape(reactivate_url, quote=True)}" class="button">Reactivate Membership &rarr;</a>

            <p>We'd love to see you back in the community!</p>

            <p>Best regards,<br><strong>Tom's Trading Room Team</strong></p>"""
    return _layout(
        "#ef4444",
        "&#9200; Your Membership Has Expired",
        body,
        "Tom's Trading Room | Reactivate Anytime",
        "\n          .highlight { background: #fef3c7; padding: 15px; border-left: 4px solid #f59e0b; margin: 20px 0; border-radius: 4px; }",
    )
