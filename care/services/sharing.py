"""Share links for records.

Sharing opens WhatsApp's web intent with a pre-filled message; nothing
is sent from the server.
"""
from urllib.parse import quote

from care.filters import as_day, field_value

WHATSAPP_URL = 'https://wa.me/?text={text}'


def whatsapp_link(text: str) -> str:
    return WHATSAPP_URL.format(text=quote(text, safe="!'()*"))


def lab_report_message(report) -> str:
    return '\n'.join([
        f"Lab Report: {field_value(report, 'name')}",
        f"Type: {field_value(report, 'type')}",
        f"Date: {as_day(field_value(report, 'date'))}",
        f"Hospital: {field_value(report, 'hospital')}",
        f"Doctor: {field_value(report, 'doctor')}",
    ])


def prescription_message(prescription) -> str:
    return f"Prescription from {field_value(prescription, 'doctor_name')} - {as_day(field_value(prescription, 'date'))}"


def health_record_message(record) -> str:
    return (f"{field_value(record, 'type')}: {field_value(record, 'value')} "
            f"{field_value(record, 'unit')} - {as_day(field_value(record, 'date'))}")


def share_payload(text: str, message: str = 'Opening WhatsApp...') -> dict:
    return {'ok': True, 'text': text, 'url': whatsapp_link(text), 'message': message}


def download_payload(message: str, url: str | None = None) -> dict:
    """Acknowledge a download request; ``url`` points at the stored file when there is one."""
    return {'ok': True, 'message': message, 'url': url}
