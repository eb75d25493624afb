from io import BytesIO
from reportlab.lib.pagesizes import A4
from reportlab.lib import colors
from reportlab.lib.colors import HexColor
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib.styles import getSampleStyleSheet
from django.http import HttpResponse

HEADER_BLUE = HexColor("#1F618D")
GRID_GREY = HexColor("#B3B6B7")


def table_style(padding):
    return TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), HEADER_BLUE),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('GRID', (0, 0), (-1, -1), 0.3, GRID_GREY),
        ('ROWBACKGROUNDS', (0,1), (-1,-1), [HexColor("#F8F9F9"), HexColor("#EBF5FB")]),
        ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
        ('TOPPADDING', (0,0), (-1,-1), padding),
        ('BOTTOMPADDING', (0,0), (-1,-1), padding),
    ])


def build_monthly_report_pdf(report, payments):
    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4, rightMargin=20, leftMargin=20, topMargin=20, bottomMargin=20)
    elements = []
    styles = getSampleStyleSheet()
    table_width = A4[0] - doc.leftMargin - doc.rightMargin

    # Header info
    header_data = [
        ["Year:", str(report["year"]), "Month:", str(report["month"])],
        ["Start Date:", report["start_date"].strftime("%Y-%m-%d"), "End Date:", report["end_date"].strftime("%Y-%m-%d")],
    ]
    col_widths_header = [table_width * 0.15, table_width * 0.35, table_width * 0.15, table_width * 0.35]

    header_table = Table(header_data, colWidths=col_widths_header, hAlign='LEFT')
    header_table.setStyle(TableStyle([
        # Labels (col 0 and 2)
        ('BACKGROUND', (0,0), (0,-1), HEADER_BLUE),
        ('BACKGROUND', (2,0), (2,-1), HEADER_BLUE),
        ('TEXTCOLOR', (0,0), (0,-1), colors.white),
        ('TEXTCOLOR', (2,0), (2,-1), colors.white),

        ('FONTNAME', (0,0), (-1,-1), 'Helvetica'),
        ('FONTSIZE', (0,0), (-1,-1), 10),
        ('GRID', (0,0), (-1,-1), 0.3, GRID_GREY),
        ('VALIGN', (0,0), (-1,-1), 'MIDDLE'),
        ('ALIGN', (0,0), (-1,-1), 'CENTER'),
        ('TOPPADDING', (0,0), (-1,-1), 6),
        ('BOTTOMPADDING', (0,0), (-1,-1), 6),
    ]))

    elements.append(header_table)
    elements.append(Spacer(1, 15))

    # Summary table
    elements.append(Paragraph("Monthly Collection Summary", styles['Heading2']))
    summary_data = [
        ["Metric", "Value"],
        ["Total Collected", f"{report['total_collected']:,.2f}"],
        ["Payments Received", str(report["payment_count"])],
        ["Pledges Paid Into", str(report["pledge_count"])],
    ]
    t_summary = Table(summary_data, colWidths=[table_width * 0.5, table_width * 0.5], hAlign='CENTER')
    t_summary.setStyle(table_style(8))
    elements.append(t_summary)
    elements.append(Spacer(1, 15))

    # Payment details table
    elements.append(Paragraph("Payment Details", styles['Heading2']))
    payment_data = [["Pledge ID", "Donor", "Payment Date", "Method", "Amount"]]
    for p in payments.order_by('date', 'id'):
        payment_data.append([
            str(p.pledge_id),
            p.pledge.full_name,
            p.date.strftime("%Y-%m-%d"),
            p.method,
            f"{p.amount:,.2f}",
        ])

    num_cols = len(payment_data[0])
    t_payments = Table(payment_data, colWidths=[table_width / num_cols] * num_cols, hAlign='CENTER')
    t_payments.setStyle(table_style(6))
    elements.append(t_payments)

    doc.build(elements)
    buffer.seek(0)
    return buffer


def generate_monthly_report_pdf(report, payments):
    buffer = build_monthly_report_pdf(report, payments)

    filename = f"collection_report_{report['year']}_{report['month']:02d}.pdf"

    response = HttpResponse(buffer, content_type='application/pdf')
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response
