"""
Booking message templates.

Patient and therapist emails plus the WhatsApp confirmation. All copy is in
Brazilian Portuguese. Values interpolated into HTML are escaped.
"""

from datetime import datetime
from html import escape
from typing import Optional

DEFAULT_PATIENT_THERAPIST_NAME = "TRG Nexus"
DEFAULT_THERAPIST_GREETING = "Terapeuta"
DEFAULT_WHATSAPP_THERAPIST_NAME = "Especialista TRG"
DEFAULT_COMPLAINT = "Não informada"

PATIENT_SUBJECT = "Confirmação de Agendamento - TRG Nexus"


def _e(value: Optional[object]) -> str:
    if value is None:
        return ""
    return escape(str(value))


def patient_confirmation_html(
    name: str,
    date: str,
    time: str,
    therapist_name: Optional[str] = None,
    year: Optional[int] = None,
) -> str:
    """Confirmation email sent to the patient."""
    year = year or datetime.now().year
    therapist = therapist_name or DEFAULT_PATIENT_THERAPIST_NAME

    return f"""
    <div style="font-family: Arial, sans-serif; color: #333; max-width: 600px; margin: 0 auto;">
        <div style="background-color: #f8fafc; padding: 20px; text-align: center; border-radius: 10px 10px 0 0;">
            <h2 style="color: #0f172a; margin: 0;">Agendamento Confirmado!</h2>
        </div>
        <div style="padding: 20px; border: 1px solid #e2e8f0; border-top: none; border-radius: 0 0 10px 10px;">
            <p>Olá, <strong>{_e(name)}</strong>,</p>
            <p>Seu agendamento foi realizado com sucesso. Abaixo estão os detalhes da sua sessão:</p>

            <div style="background-color: #f1f5f9; padding: 15px; border-radius: 8px; margin: 20px 0;">
                <p style="margin: 5px 0;"><strong>Data:</strong> {_e(date)}</p>
                <p style="margin: 5px 0;"><strong>Horário:</strong> {_e(time)}</p>
                <p style="margin: 5px 0;"><strong>Terapeuta:</strong> {_e(therapist)}</p>
            </div>

            <h3>Informações Importantes</h3>
            <ul>
                <li><strong>Cancelamento:</strong> Cancelamentos devem ser feitos com pelo menos 24 horas de antecedência. Cancelamentos tardios podem estar sujeitos a uma taxa de 50% do valor da sessão.</li>
                <li><strong>Pontualidade:</strong> Recomendamos entrar na sala de espera virtual 5 minutos antes do horário agendado.</li>
                <li><strong>Ambiente:</strong> Escolha um local tranquilo, privado e com boa conexão de internet.</li>
            </ul>

            <p style="margin-top: 30px;">Se tiver dúvidas, entre em contato conosco pelo WhatsApp.</p>

            <p style="font-size: 12px; color: #64748b; margin-top: 30px; text-align: center;">
                © {year} TRG Nexus. Todos os direitos reservados.
            </p>
        </div>
    </div>
    """


def patient_confirmation_text(
    name: str,
    date: str,
    time: str,
    therapist_name: Optional[str] = None,
) -> str:
    therapist = therapist_name or DEFAULT_PATIENT_THERAPIST_NAME
    return (
        f"Olá, {name},\n\n"
        "Seu agendamento foi realizado com sucesso.\n\n"
        f"Data: {date}\n"
        f"Horário: {time}\n"
        f"Terapeuta: {therapist}\n\n"
        "Cancelamentos devem ser feitos com pelo menos 24 horas de antecedência.\n"
        "Recomendamos entrar na sala de espera virtual 5 minutos antes do horário agendado.\n\n"
        "Se tiver dúvidas, entre em contato conosco pelo WhatsApp."
    )


def therapist_alert_subject(patient_name: str) -> str:
    return f"📅 Novo Agendamento: {patient_name}"


def therapist_alert_html(
    therapist_name: Optional[str],
    patient_name: str,
    date: str,
    time: str,
    phone: Optional[str],
    main_complaint: Optional[str],
    dashboard_url: str,
) -> str:
    """New-appointment alert sent to the therapist."""
    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8">
        <title>Novo Agendamento</title>
    </head>
    <body style="font-family: 'Segoe UI', sans-serif; background-color: #f8fafc; padding: 20px;">
        <div style="max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 12px; box-shadow: 0 4px 6px rgba(0,0,0,0.1); overflow: hidden;">
            <div style="background-color: #3b82f6; padding: 24px; text-align: center;">
                <h1 style="color: #ffffff; margin: 0; font-size: 22px;">📅 Novo Agendamento Recebido</h1>
            </div>
            <div style="padding: 32px;">
                <p style="color: #334155; font-size: 16px;">Olá, <strong>{_e(therapist_name or DEFAULT_THERAPIST_GREETING)}</strong>!</p>
                <p style="color: #334155;">Você tem um novo agendamento confirmado na sua agenda.</p>

                <div style="background-color: #eff6ff; border-left: 4px solid #3b82f6; padding: 20px; margin: 24px 0;">
                    <p style="margin: 0 0 8px 0;"><strong>Cliente:</strong> {_e(patient_name)}</p>
                    <p style="margin: 0 0 8px 0;"><strong>Data:</strong> {_e(date)}</p>
                    <p style="margin: 0 0 8px 0;"><strong>Horário:</strong> {_e(time)}</p>
                    <p style="margin: 0 0 8px 0;"><strong>Telefone:</strong> {_e(phone)}</p>
                    <p style="margin: 0;"><strong>Queixa:</strong> {_e(main_complaint or DEFAULT_COMPLAINT)}</p>
                </div>

                <div style="text-align: center; margin-top: 32px;">
                    <a href="{_e(dashboard_url)}" style="background-color: #3b82f6; color: #ffffff; padding: 12px 24px; text-decoration: none; border-radius: 8px; font-weight: 600;">
                        Ver na Minha Agenda
                    </a>
                </div>
            </div>
        </div>
    </body>
    </html>
    """


def therapist_alert_text(
    therapist_name: Optional[str],
    patient_name: str,
    date: str,
    time: str,
    phone: Optional[str],
    main_complaint: Optional[str],
    dashboard_url: str,
) -> str:
    return (
        f"Olá, {therapist_name or DEFAULT_THERAPIST_GREETING}!\n\n"
        "Você tem um novo agendamento confirmado na sua agenda.\n\n"
        f"Cliente: {patient_name}\n"
        f"Data: {date}\n"
        f"Horário: {time}\n"
        f"Telefone: {phone or ''}\n"
        f"Queixa: {main_complaint or DEFAULT_COMPLAINT}\n\n"
        f"Ver na Minha Agenda: {dashboard_url}"
    )


def whatsapp_confirmation(
    name: str,
    date: str,
    time: str,
    therapist_name: Optional[str] = None,
) -> str:
    therapist = therapist_name or DEFAULT_WHATSAPP_THERAPIST_NAME
    return (
        f"Olá {name}, seu agendamento na TRG Nexus está confirmado! ✅\n\n"
        f"📅 Data: {date}\n"
        f"⏰ Horário: {time}\n"
        f"👨‍⚕️ Terapeuta: {therapist}\n\n"
        "Recomendamos entrar 5 minutos antes. Em caso de dúvidas, responda esta mensagem."
    )
