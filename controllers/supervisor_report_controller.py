from flask import Blueprint, render_template, request, send_file, flash
from utils.auth import role_required, current_user
from models.beneficiary import Beneficiary, STATUSES
from models.ngo import NGO
from datetime import datetime
import io, csv
from openpyxl import Workbook
from reportlab.pdfgen import canvas
from reportlab.lib.pagesizes import A4

supervisor_report_bp = Blueprint("supervisor_report", __name__, url_prefix="/supervisor/reports")

REPORT_COLUMNS = ["JanSetu ID", "Name", "Status", "Age Range", "Gender", "Location", "Registered By", "Registered On"]


def _selected_status():
    status = request.args.get("status")
    return status if status in STATUSES else None


def _report_rows():
    """Rows of the current supervisor's NGO registrations, filtered by ?status=."""
    user = current_user()
    if not user.get("ngo_id"):
        return []
    rows = []
    for b in Beneficiary.for_ngo(user["ngo_id"], status=_selected_status()):
        registered_at = b.get("registered_at")
        rows.append([
            b.get("jansetu_id", ""),
            b.get("name", ""),
            b.get("status", ""),
            b.get("age_range", ""),
            b.get("gender", ""),
            b.get("location", ""),
            b.get("registered_by", ""),
            registered_at.strftime("%Y-%m-%d") if registered_at else "",
        ])
    return rows


def _file_name(ext):
    status = (_selected_status() or "all").lower()
    return f"beneficiaries_{status}_{datetime.utcnow():%Y%m%d}.{ext}"


@supervisor_report_bp.route("/registrations")
@role_required("supervisor")
def view_report():
    user = current_user()
    if not user.get("ngo_id"):
        flash("You are not assigned to any NGO.", "danger")

    return render_template("supervisor/viewReport.html",
                           columns=REPORT_COLUMNS,
                           rows=_report_rows(),
                           statuses=STATUSES,
                           selected_status=_selected_status())


# ---------------- Export CSV ----------------
@supervisor_report_bp.route("/export/csv")
@role_required("supervisor")
def export_csv():
    si = io.StringIO()
    cw = csv.writer(si)
    cw.writerow(REPORT_COLUMNS)
    cw.writerows(_report_rows())

    output = io.BytesIO()
    output.write(si.getvalue().encode("utf-8"))
    output.seek(0)
    return send_file(output, mimetype="text/csv", as_attachment=True, download_name=_file_name("csv"))


# ---------------- Export Excel ----------------
@supervisor_report_bp.route("/export/excel")
@role_required("supervisor")
def export_excel():
    wb = Workbook()
    ws = wb.active
    ws.title = "Beneficiaries"
    ws.append(REPORT_COLUMNS)
    for row in _report_rows():
        ws.append(row)

    output = io.BytesIO()
    wb.save(output)
    output.seek(0)
    return send_file(output, mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
                     as_attachment=True, download_name=_file_name("xlsx"))


# ---------------- Export PDF ----------------
@supervisor_report_bp.route("/export/pdf")
@role_required("supervisor")
def export_pdf():
    user = current_user()
    ngo = NGO.find_by_id(user.get("ngo_id")) if user.get("ngo_id") else None

    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4
    y = height - 50
    c.setFont("Helvetica-Bold", 14)
    c.drawString(50, y, "Beneficiary Registrations")
    y -= 30
    c.setFont("Helvetica", 11)
    c.drawString(50, y, f"NGO: {ngo['name'] if ngo else '-'}")
    c.drawString(300, y, f"Status: {_selected_status() or 'All'}")
    y -= 30

    # JanSetu ID, Name, Status, Gender, Registered On
    x_positions = [50, 130, 290, 370, 450]
    headers = [REPORT_COLUMNS[i] for i in (0, 1, 2, 4, 7)]
    c.setFont("Helvetica-Bold", 10)
    for x, header in zip(x_positions, headers):
        c.drawString(x, y, header)
    y -= 20

    c.setFont("Helvetica", 10)
    for row in _report_rows():
        if y < 50:
            c.showPage()
            c.setFont("Helvetica", 10)
            y = height - 50
        for x, value in zip(x_positions, (row[0], row[1][:28], row[2], row[4], row[7])):
            c.drawString(x, y, str(value))
        y -= 18

    c.save()
    buffer.seek(0)
    return send_file(buffer, mimetype="application/pdf", as_attachment=True, download_name=_file_name("pdf"))
