# ============================================================================
# Harmoniq Safety - Risk assessment document templates
# ============================================================================
# One fixed layout per regulatory form. Each function takes the prepared
# document data (see builder.py) and returns a complete HTML document.
# ============================================================================

from typing import Dict

from ..catalog import PPE_OPTIONS
from ..scoring import (
    GREEN, RED, SAM_LEVELS, YELLOW, compliance_color, osa_score_color,
    risk_color, risk_level,
)
from .styles import (
    _safe, badge, document, footer, header, info_rows, or_blank, section,
    signature_block, signatures, table,
)

ARBOWET_STATUS_LABELS = {
    "compliant": ("✓ Compliant", "#dcfce7", "#166534"),
    "partial": ("~ Partial", "#fef9c3", "#854d0e"),
    "non_compliant": ("✗ Non-Compliant", "#fee2e2", "#991b1b"),
}
ARBOWET_NA = ("N/A", "#f3f4f6", "#6b7280")

JSA_STATUS_LABELS = {
    "pass": ("✓ Pass", "#dcfce7"),
    "fail": ("✗ Fail", "#fee2e2"),
    "na": ("N/A", "#f3f4f6"),
}


# ---------------------------------------------------------------------------
# JHA (US)
# ---------------------------------------------------------------------------

def jha_html(data: Dict, generated: str) -> str:
    rows = []
    for h in data.get("hazards") or []:
        score = h.get("risk_score") or 0
        rows.append([
            _safe(h.get("step")), _safe(h.get("hazard")),
            _safe(h.get("severity")), _safe(h.get("probability")),
            badge(str(score), risk_color(risk_level(score))),
            _safe(h.get("controls")),
        ])
    hazards = table(["Task Step", "Potential Hazards", "S", "P", "Risk", "Controls"], rows, small=(2, 3, 4))
    hazards += '<div class="note">S = Severity (1-5), P = Probability (1-5), Risk = S × P</div>'

    required = set(data.get("ppe_required") or [])
    ppe = "".join(
        f'<div class="grid-item"><span class="checkbox{" checked" if p["label"] in required else ""}"></span>'
        f'{_safe(p["label"])}</div>'
        for p in PPE_OPTIONS
    )

    body = header(data.get("company_name"), "Job Hazard Analysis (JHA)",
                  "OSHA-Compliant Workplace Safety Assessment", "OSHA JHA Form",
                  logo_url=data.get("logo_url"))
    body += section("1. Job Information", info_rows([
        ("Job/Task Title:", data.get("job_title")),
        ("Department:", data.get("department")),
        ("Location:", data.get("location")),
        ("Analysis Date:", data.get("analysis_date")),
        ("Prepared By:", data.get("analyst_name")),
    ]))
    body += section("2. Hazard Analysis", hazards)
    body += section("3. Required Personal Protective Equipment (PPE)", f'<div class="grid">{ppe}</div>')
    if data.get("additional_notes"):
        body += section("4. Additional Notes & Recommendations",
                        f'<p style="line-height:1.5">{_safe(data["additional_notes"])}</p>')
    body += signatures(
        "Signatures & Approval",
        signature_block(f"Prepared By: {_safe(data.get('analyst_name'))}",
                        f"Date: {_safe(data.get('analysis_date'))}"),
        signature_block(f"Reviewed By: {or_blank(data.get('reviewed_by'))}",
                        f"Date: {or_blank(data.get('approval_date'))}"),
    )
    body += footer("Generated", generated, "Job Hazard Analysis", "Page 1 of 1")
    return document("Job Hazard Analysis (JHA)", "en", body)


# ---------------------------------------------------------------------------
# JSA (US)
# ---------------------------------------------------------------------------

def jsa_html(data: Dict, generated: str) -> str:
    checklist = ""
    for category in data.get("categories") or []:
        rows = []
        for item in category.get("items") or []:
            label, color = JSA_STATUS_LABELS.get(item.get("status"), ("-", "#ffffff"))
            rows.append([_safe(item.get("label")), badge(label, color), _safe(item.get("notes"))])
        checklist += f'<div class="box"><div class="box-header">{_safe(category.get("title"))}</div>'
        checklist += f'<div class="box-content">{table(["Item", "Status", "Notes"], rows)}</div></div>'
    checklist += (
        '<div class="summary">'
        f'<div><div class="number" style="color:{GREEN}">{_safe(data.get("pass_count", 0))}</div>Pass</div>'
        f'<div><div class="number" style="color:{RED}">{_safe(data.get("fail_count", 0))}</div>Fail</div>'
        f'<div><div class="number">{_safe(data.get("na_count", 0))}</div>N/A</div>'
        '</div>'
    )

    hazards = (
        '<p><strong>Identified Hazards:</strong><br>'
        f'{_safe(data.get("identified_hazards") or "None identified")}</p>'
        '<p><strong>Control Measures:</strong><br>'
        f'{_safe(data.get("control_measures") or "Standard controls in place")}</p>'
        '<p style="color:#991b1b"><strong>Stop Work Conditions:</strong><br>'
        f'{_safe(data.get("stop_work_conditions") or "If conditions change, stop and reassess")}</p>'
    )

    body = header(data.get("company_name"), "Job Safety Analysis (JSA)",
                  "Daily Pre-Work Safety Checklist", "OSHA Daily JSA", logo_url=data.get("logo_url"))
    body += section("1. Job Details", info_rows([
        ("Date/Time:", f"{data.get('date') or ''} {data.get('time') or ''}".strip()),
        ("Location:", data.get("location")),
        ("Task Description:", data.get("job_description")),
        ("Crew Leader:", data.get("crew_leader")),
        ("Crew Members:", ", ".join(data.get("crew_members") or [])),
    ]))
    body += section("2. Pre-Work Safety Checklist", checklist)
    body += section("3. Identified Hazards & Controls", hazards)
    body += signatures(
        "Crew Acknowledgment",
        signature_block(f"Crew Leader: {_safe(data.get('crew_leader'))}", f"Date: {_safe(data.get('date'))}"),
        signature_block("Supervisor Review", "Date: ________________"),
        intro="All crew members have participated in this JSA briefing, understand the hazards "
              "and control measures, and are prepared to perform the work safely.",
    )
    body += footer("Generated", generated, "Job Safety Analysis", "Page 1 of 1")
    return document("Job Safety Analysis (JSA)", "en", body)


# ---------------------------------------------------------------------------
# RI&E (NL)
# ---------------------------------------------------------------------------

def rie_html(data: Dict, generated: str) -> str:
    risks = ""
    for risk in data.get("risks") or []:
        priority = risk.get("priority") or "low"
        risks += (
            '<div class="box"><div class="box-header">'
            f'<span>{_safe(risk.get("category"))}</span>'
            f'<span>Risk: {_safe(risk.get("risk_score"))} {badge(priority.upper(), risk_color(priority))}</span>'
            '</div><div class="box-content">'
            + info_rows([
                ("Beschrijving:", risk.get("description") or "N/A"),
                ("Ernst × Kans × Blootstelling:",
                 f"{risk.get('severity')} × {risk.get('probability')} × {risk.get('exposure')} = {risk.get('risk_score')}"),
                ("Huidige maatregelen:", risk.get("current_measures")),
                ("Aanvullende maatregelen:", risk.get("additional_measures")),
                ("Verantwoordelijke:", risk.get("responsible")),
                ("Deadline:", risk.get("deadline")),
            ])
            + '</div></div>'
        )
    if not risks:
        risks = '<p class="note">Geen risico\'s geïdentificeerd.</p>'

    plan_rows = [
        [_safe(a.get("action")), badge(a.get("priority") or "low", risk_color(a.get("priority"))),
         _safe(a.get("responsible")), _safe(a.get("deadline")), _safe(a.get("status"))]
        for a in data.get("action_plan") or []
    ]

    body = header(data.get("company_name"), "Risico-Inventarisatie en -Evaluatie (RI&E)",
                  "Risk Inventory & Evaluation • Arbowet Compliant", "RI&E Formulier",
                  regulation="Arbowet Art. 5", logo_url=data.get("logo_url"))
    body += section("1. Bedrijfsgegevens (Company Information)", info_rows([
        ("Bedrijfsnaam:", data.get("company_name")),
        ("Afdeling:", data.get("department")),
        ("Locatie:", data.get("location")),
        ("Datum beoordeling:", data.get("assessment_date")),
        ("Beoordelaar:", data.get("assessor_name")),
    ]))
    body += section("2. Risico-identificatie en -evaluatie", risks)
    body += section("3. Plan van Aanpak (Action Plan)",
                    table(["Actie", "Prioriteit", "Verantw.", "Deadline", "Status"], plan_rows, small=(1,)))
    body += signatures(
        "Ondertekening (Signatures)",
        signature_block(f"Beoordelaar: {_safe(data.get('assessor_name'))}",
                        f"Datum: {_safe(data.get('assessment_date'))}"),
        signature_block(f"Goedgekeurd door: {or_blank(data.get('approved_by'))}",
                        f"Datum: {or_blank(data.get('approval_date'))}"),
        extra=f"Volgende evaluatiedatum: {or_blank(data.get('evaluation_date'))}",
    )
    body += footer("Gegenereerd", generated, "RI&E Assessment", "Pagina 1 van 1")
    return document("Risico-Inventarisatie en -Evaluatie (RI&E)", "nl", body)


# ---------------------------------------------------------------------------
# Arbowet audit (NL)
# ---------------------------------------------------------------------------

def arbowet_html(data: Dict, generated: str) -> str:
    score = data.get("compliance_score") or 0
    score_color = compliance_color(score)

    audit_info = info_rows([
        ("Bedrijf:", data.get("company_name")),
        ("Auditor:", data.get("auditor")),
        ("Datum:", data.get("audit_date")),
    ])
    audit_info += (
        '<div class="summary">'
        f'<div><div class="number" style="color:{score_color}">{_safe(score)}%</div>Compliance</div>'
        f'<div><div class="number" style="color:{GREEN}">{_safe(data.get("compliant_count", 0))}</div>Compliant</div>'
        f'<div><div class="number" style="color:{YELLOW}">{_safe(data.get("partial_count", 0))}</div>Partial</div>'
        f'<div><div class="number" style="color:{RED}">{_safe(data.get("non_compliant_count", 0))}</div>Non-Compliant</div>'
        f'<div><div class="number" style="color:#6b7280">{_safe(data.get("na_count", 0))}</div>N/A</div>'
        '</div>'
    )

    articles = ""
    for article in data.get("articles") or []:
        rows = []
        for item in article.get("items") or []:
            label, bg, fg = ARBOWET_STATUS_LABELS.get(item.get("status"), ARBOWET_NA)
            rows.append([_safe(item.get("label")), badge(label, bg, fg)])
        articles += (
            '<div class="box"><div class="box-header">'
            f'<span>{_safe(article.get("title"))}<br><span class="note">{_safe(article.get("description"))}</span></span>'
            f'<span>{_safe(article.get("compliant", 0))}/{_safe(article.get("applicable", 0))}</span>'
            f'</div><div class="box-content">{table(["Item", "Status"], rows)}</div></div>'
        )

    body = header(data.get("company_name"), "Arbowet Compliance Audit",
                  "Dutch Working Conditions Act Compliance Check", "Arbowet Audit",
                  regulation="Arbeidsomstandighedenwet", logo_url=data.get("logo_url"))
    body += section("1. Audit Information", audit_info)
    body += section("2. Compliance Check by Article", articles)
    if data.get("non_compliant_count"):
        alerts = ""
        for article in data.get("articles") or []:
            for item in article.get("items") or []:
                if item.get("status") != "non_compliant":
                    continue
                action = item.get("actionNeeded")
                alerts += f'<div class="alert"><strong>{_safe(item.get("label"))}</strong>'
                alerts += f'<br>→ {_safe(action)}</div>' if action else "</div>"
        body += section("3. Non-Compliant Items - Action Required", alerts)
    overall = f'<p style="line-height:1.4">{_safe(data.get("overall_assessment"))}</p>'
    if data.get("priority_actions"):
        overall += f'<p><strong>Priority Actions:</strong><br>{_safe(data["priority_actions"])}</p>'
    body += section("4. Overall Assessment", overall)
    next_audit = data.get("next_audit_date")
    body += signatures(
        "Ondertekening (Signatures)",
        signature_block(f"Auditor: {_safe(data.get('auditor'))}", f"Datum: {_safe(data.get('audit_date'))}"),
        signature_block("Management Approval", "Datum: ________________"),
        extra=f"Volgende audit: {_safe(next_audit)}" if next_audit else "",
    )
    body += footer("Gegenereerd", generated, "Arbowet Audit", "Pagina 1 van 1")
    return document("Arbowet Compliance Audit", "nl", body)


# ---------------------------------------------------------------------------
# SAM (SE)
# ---------------------------------------------------------------------------

def _rating_bar(rating, top: int = 5) -> str:
    try:
        rating = int(rating or 0)
    except (TypeError, ValueError):
        rating = 0
    cells = "".join(
        f'<span class="badge" style="background:{"#1a1a1a" if i < rating else "#e5e5e5"};'
        f'color:{"#ffffff" if i < rating else "#999999"}">{i + 1}</span> '
        for i in range(top)
    )
    return f"<span>{cells}</span>"


def sam_html(data: Dict, generated: str) -> str:
    organizational = ""
    for factor in data.get("organizational_factors") or []:
        organizational += (
            f'<div class="box"><div class="box-header"><span>{_safe(factor.get("factor"))}</span>'
            f'{_rating_bar(factor.get("rating"))}</div>'
        )
        if factor.get("notes"):
            organizational += f'<div class="box-content note">{_safe(factor["notes"])}</div>'
        organizational += "</div>"
    if not organizational:
        organizational = '<p class="note">Inga faktorer bedömda.</p>'

    social_rows = []
    for factor in data.get("social_factors") or []:
        value = factor.get("value")
        shown = ("Ja" if value else "Nej") if isinstance(value, bool) else f"{value}/5"
        social_rows.append([_safe(factor.get("factor")), _safe(shown)])

    risk_rows = []
    for risk in data.get("risks") or []:
        level = risk.get("level") or "low"
        color_key = "high" if level == "very_high" else level
        risk_rows.append([
            _safe(risk.get("description")), _safe(risk.get("severity")), _safe(risk.get("probability")),
            _safe(risk.get("risk_score")), badge(SAM_LEVELS.get(level, level), risk_color(color_key)),
        ])

    action_rows = [
        [_safe(a.get("action")), _safe(a.get("responsible")), _safe(a.get("deadline")), _safe(a.get("follow_up"))]
        for a in data.get("actions") or []
    ]

    body = header(data.get("company_name"), "Systematiskt Arbetsmiljöarbete (SAM)",
                  "Systematic Work Environment Management • AFS 2023:1 Compliant", "SAM Formulär",
                  regulation="Arbetsmiljöverket", logo_url=data.get("logo_url"))
    body += section("1. Arbetsplats Information (Workplace Info)", info_rows([
        ("Företag:", data.get("company_name")),
        ("Arbetsplats:", data.get("workplace")),
        ("Avdelning:", data.get("department")),
        ("Datum:", data.get("assessment_date")),
        ("Utförare:", data.get("assessor_name")),
    ]))
    body += section("2. Organisatorisk Arbetsmiljö (AFS 2015:4)", organizational)
    body += section("3. Social Arbetsmiljö", table(["Faktor", "Värde"], social_rows, small=(1,)))
    body += section("4. Riskbedömning (Risk Assessment)",
                    table(["Identifierade risker", "S", "P", "Risk", "Nivå"], risk_rows, small=(1, 2, 3)))
    body += section("5. Åtgärdsplan (Action Plan)",
                    table(["Planerade åtgärder", "Ansvarig", "Deadline", "Uppföljning"], action_rows))
    body += signatures(
        "Godkännande (Approval)",
        signature_block(f"Utförare: {_safe(data.get('assessor_name'))}",
                        f"Datum: {_safe(data.get('assessment_date'))}"),
        signature_block(f"Godkänd av: {or_blank(data.get('approved_by'))}",
                        f"Datum: {or_blank(data.get('approval_date'))}"),
        extra=f"Nästa granskning: {or_blank(data.get('next_review_date'))}",
    )
    body += footer("Genererad", generated, "SAM Assessment", "Sida 1 av 1")
    return document("Systematiskt Arbetsmiljöarbete (SAM)", "sv", body)


# ---------------------------------------------------------------------------
# OSA (SE)
# ---------------------------------------------------------------------------

def osa_html(data: Dict, generated: str) -> str:
    overall = data.get("overall_average") or 0
    concerns = data.get("concern_count") or 0
    low = data.get("low_rating_count") or 0

    info = info_rows([
        ("Organisation:", data.get("company_name")),
        ("Avdelning:", data.get("department")),
        ("Datum:", data.get("assessment_date")),
    ])
    if data.get("respondent"):
        role = f" ({data['role']})" if data.get("role") else ""
        info += info_rows([("Respondent:", f"{data['respondent']}{role}")])
    info += (
        '<div class="summary">'
        f'<div><div class="number" style="color:{osa_score_color(overall)}">{overall:.1f}</div>Overall Average</div>'
        f'<div><div class="number" style="color:{RED if concerns else GREEN}">{concerns}</div>Concerns</div>'
        f'<div><div class="number" style="color:{YELLOW if low else GREEN}">{low}</div>Low Ratings</div>'
        '</div>'
    )

    sections = ""
    for s in data.get("sections") or []:
        average = s.get("average") or 0
        rows = []
        for q in s.get("questions") or []:
            flag = ' <span class="badge" style="background:#fee2e2;color:#991b1b">⚠ Risk</span>' if q.get("concern") else ""
            rows.append([_safe(q.get("label")) + flag, _rating_bar(q.get("rating"))])
        sections += (
            '<div class="box"><div class="box-header">'
            f'<span>{_safe(s.get("title"))}</span>'
            f'<span style="color:{osa_score_color(average)}">{average:.1f}</span>'
            f'</div><div class="box-content">{table(["Fråga", "Betyg"], rows)}</div></div>'
        )

    body = header(data.get("company_name"), "Organisatorisk och Social Arbetsmiljö (OSA)",
                  "Psychosocial Work Environment Assessment • AFS 2015:4 Compliant", "OSA Formulär",
                  regulation="Arbetsmiljöverket", logo_url=data.get("logo_url"))
    body += section("1. Bedömningsinformation", info)
    body += section("2. Bedömningsresultat per område", sections)
    if data.get("overall_concerns") or data.get("suggestions"):
        comments = ""
        if data.get("overall_concerns"):
            comments += f'<p><strong>Bekymmer:</strong><br>{_safe(data["overall_concerns"])}</p>'
        if data.get("suggestions"):
            comments += f'<p><strong>Förbättringsförslag:</strong><br>{_safe(data["suggestions"])}</p>'
        body += section("3. Övergripande kommentarer", comments)
    body += ('<div class="note">Skala: 1 = Stämmer inte alls, 2 = Stämmer dåligt, 3 = Stämmer delvis, '
             '4 = Stämmer ganska bra, 5 = Stämmer helt</div>')
    body += signatures(
        "Godkännande",
        signature_block(f"Respondent: {or_blank(data.get('respondent'))}",
                        f"Datum: {_safe(data.get('assessment_date'))}"),
        signature_block("HR/Management Review", "Datum: ________________"),
    )
    body += footer("Genererad", generated, "OSA Assessment", "Sida 1 av 1")
    return document("Organisatorisk och Social Arbetsmiljö (OSA)", "sv", body)


TEMPLATES = {
    "jha": jha_html,
    "jsa": jsa_html,
    "rie": rie_html,
    "arbowet": arbowet_html,
    "sam": sam_html,
    "osa": osa_html,
}
