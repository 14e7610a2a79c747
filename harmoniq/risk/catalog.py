"""
Harmoniq Safety - Risk assessment form catalogs

Static item lists behind each regulatory form. Ids are what submissions
store in their responses; labels are what the PDFs print.
"""

# form_type -> (country, short code, display name)
FORM_TYPES = {
    "jha": ("US", "JHA", "Job Hazard Analysis"),
    "jsa": ("US", "JSA", "Job Safety Analysis"),
    "rie": ("NL", "RIE", "Risico-Inventarisatie en -Evaluatie"),
    "arbowet": ("NL", "ARBOWET", "Arbowet Compliance Audit"),
    "sam": ("SE", "SAM", "Systematiskt Arbetsmiljöarbete"),
    "osa": ("SE", "OSA", "Organisatorisk och Social Arbetsmiljö"),
}

EVALUATION_STATUSES = ("draft", "submitted", "reviewed")


# ================================================================
# US - JHA / JSA
# ================================================================

PPE_OPTIONS = [
    {"id": "hard_hat", "label": "Hard Hat"},
    {"id": "safety_glasses", "label": "Safety Glasses"},
    {"id": "face_shield", "label": "Face Shield"},
    {"id": "hearing_protection", "label": "Hearing Protection"},
    {"id": "gloves", "label": "Gloves"},
    {"id": "steel_toe_boots", "label": "Steel-Toe Boots"},
    {"id": "high_vis_vest", "label": "High-Vis Vest"},
    {"id": "respirator", "label": "Respirator"},
    {"id": "fall_protection", "label": "Fall Protection"},
    {"id": "chemical_suit", "label": "Chemical Suit"},
]

HAZARD_TYPES = [
    {"id": "struck_by", "label": "Struck-by", "description": "Moving objects, falling materials"},
    {"id": "fall", "label": "Fall Hazards", "description": "Heights, slips, trips"},
    {"id": "caught_in", "label": "Caught-in/Between", "description": "Moving machinery, pinch points"},
    {"id": "electrical", "label": "Electrical", "description": "Exposed wiring, high voltage"},
    {"id": "chemical", "label": "Chemical", "description": "Fumes, spills, exposure"},
    {"id": "ergonomic", "label": "Ergonomic", "description": "Lifting, repetitive motion"},
    {"id": "environmental", "label": "Environmental", "description": "Heat, cold, weather"},
    {"id": "biological", "label": "Biological", "description": "Pathogens, allergens"},
    {"id": "other", "label": "Other", "description": "Other hazards not listed"},
]

JSA_CHECKLIST_CATEGORIES = [
    {"id": "environmental", "title": "Environmental Conditions", "items": [
        {"id": "weather", "label": "Weather conditions safe for work"},
        {"id": "lighting", "label": "Adequate lighting available"},
        {"id": "ventilation", "label": "Proper ventilation in work area"},
        {"id": "temp", "label": "Temperature within safe range"},
    ]},
    {"id": "equipment", "title": "Equipment & Tools", "items": [
        {"id": "tools_checked", "label": "Tools inspected and in good condition"},
        {"id": "ppe_available", "label": "Required PPE available and functional"},
        {"id": "equipment_locked", "label": "Equipment properly locked out/tagged out"},
        {"id": "fire_ext", "label": "Fire extinguisher accessible"},
    ]},
    {"id": "site_conditions", "title": "Site Conditions", "items": [
        {"id": "housekeeping", "label": "Work area clean and organized"},
        {"id": "barricades", "label": "Barricades/warning signs in place"},
        {"id": "egress", "label": "Emergency exits clear and accessible"},
        {"id": "utilities", "label": "Underground/overhead utilities identified"},
    ]},
    {"id": "personnel", "title": "Personnel Readiness", "items": [
        {"id": "trained", "label": "All workers trained for task"},
        {"id": "fit_for_duty", "label": "Workers fit for duty"},
        {"id": "communication", "label": "Communication methods established"},
        {"id": "emergency", "label": "Emergency procedures reviewed"},
    ]},
]


# ================================================================
# NL - RI&E / Arbowet
# ================================================================

RIE_CATEGORIES = [
    {"id": "physical", "title": "Fysieke Belasting (Physical Hazards)", "pdf_name": "Fysieke risico's", "items": [
        {"id": "ph_noise", "label": "Lawaai (Noise)"},
        {"id": "ph_vibration", "label": "Trillingen (Vibration)"},
        {"id": "ph_radiation", "label": "Straling (Radiation)"},
        {"id": "ph_temp", "label": "Temperatuur (Temperature)"},
        {"id": "ph_lifting", "label": "Tillen (Lifting)"},
        {"id": "ph_posture", "label": "Houding (Posture)"},
    ]},
    {"id": "psychosocial", "title": "Psychosociale Arbeidsbelasting (PSA)", "pdf_name": "Psychosociale risico's", "items": [
        {"id": "psa_workload", "label": "Werkdruk (Workload)"},
        {"id": "psa_harassment", "label": "Intimidatie (Harassment)"},
        {"id": "psa_violence", "label": "Geweld (Violence)"},
        {"id": "psa_stress", "label": "Stress"},
        {"id": "psa_autonomy", "label": "Autonomie (Autonomy)"},
    ]},
    {"id": "biological", "title": "Biologische Agentia (Biological Agents)", "pdf_name": "Biologische risico's", "items": [
        {"id": "bio_infection", "label": "Infectierisico (Infection)"},
        {"id": "bio_allergen", "label": "Allergenen (Allergens)"},
        {"id": "bio_bloodborne", "label": "Bloedpathogenen (Blood-borne)"},
    ]},
    {"id": "chemical", "title": "Gevaarlijke Stoffen (Hazardous Substances)", "pdf_name": "Chemische risico's", "items": [
        {"id": "chem_toxic", "label": "Toxische stoffen (Toxic)"},
        {"id": "chem_irritant", "label": "Irriterende stoffen (Irritants)"},
        {"id": "chem_flammable", "label": "Brandbaar (Flammable)"},
        {"id": "chem_asbestos", "label": "Asbest (Asbestos)"},
    ]},
    {"id": "safety", "title": "Arbeidsveiligheid (Work Safety)", "pdf_name": "Arbeidsveiligheid", "items": [
        {"id": "saf_machines", "label": "Machines (Machinery)"},
        {"id": "saf_electrical", "label": "Elektriciteit (Electrical)"},
        {"id": "saf_fall", "label": "Valgevaar (Fall hazard)"},
        {"id": "saf_traffic", "label": "Verkeer (Traffic)"},
        {"id": "saf_fire", "label": "Brand (Fire)"},
    ]},
]

ARBOWET_ARTICLES = [
    {"id": "artikel_3", "title": "Artikel 3 - Arbobeleid",
     "description": "General working conditions policy", "items": [
         {"id": "a3_policy", "label": "Written safety policy in place", "required": True},
         {"id": "a3_objectives", "label": "Clear health & safety objectives defined", "required": True},
         {"id": "a3_organization", "label": "Safety responsibilities assigned", "required": True},
         {"id": "a3_budget", "label": "Budget allocated for safety measures", "required": False},
         {"id": "a3_communication", "label": "Policy communicated to all employees", "required": True},
     ]},
    {"id": "artikel_5", "title": "Artikel 5 - RI&E",
     "description": "Risk inventory and evaluation requirements", "items": [
         {"id": "a5_rie_current", "label": "Current RI&E document available", "required": True},
         {"id": "a5_rie_complete", "label": "RI&E covers all work activities", "required": True},
         {"id": "a5_plan", "label": "Plan van Aanpak (Action Plan) in place", "required": True},
         {"id": "a5_review", "label": "RI&E reviewed by certified expert (if >25 employees)", "required": False},
         {"id": "a5_update", "label": "RI&E updated after significant changes", "required": True},
     ]},
    {"id": "artikel_8", "title": "Artikel 8 - Voorlichting & Onderricht",
     "description": "Information, instruction and supervision", "items": [
         {"id": "a8_induction", "label": "New employee safety induction program", "required": True},
         {"id": "a8_training", "label": "Job-specific safety training provided", "required": True},
         {"id": "a8_refresher", "label": "Regular refresher training conducted", "required": True},
         {"id": "a8_documentation", "label": "Training records maintained", "required": True},
         {"id": "a8_language", "label": "Training provided in understandable language", "required": True},
         {"id": "a8_supervision", "label": "Adequate supervision for high-risk tasks", "required": True},
     ]},
    {"id": "artikel_13", "title": "Artikel 13 - Arbeidsongevallen & BHV",
     "description": "Accidents, first aid and emergency response", "items": [
         {"id": "a13_first_aid", "label": "First aid provisions in place", "required": True},
         {"id": "a13_bhv", "label": "Trained BHV (emergency response) team", "required": True},
         {"id": "a13_aed", "label": "AED available and staff trained", "required": False},
         {"id": "a13_emergency_plan", "label": "Emergency evacuation plan documented", "required": True},
         {"id": "a13_drills", "label": "Regular emergency drills conducted", "required": True},
         {"id": "a13_reporting", "label": "Accident reporting procedure in place", "required": True},
         {"id": "a13_investigation", "label": "Accident investigation conducted for serious incidents", "required": True},
     ]},
    {"id": "artikel_14", "title": "Artikel 14 - Arbodienstverlening",
     "description": "Occupational health services", "items": [
         {"id": "a14_contract", "label": "Contract with certified arbodienst OR maatwerkregeling", "required": True},
         {"id": "a14_pmo", "label": "Periodic medical examinations (PMO) offered", "required": True},
         {"id": "a14_absence", "label": "Sickness absence guidance available", "required": True},
         {"id": "a14_workplace_exam", "label": "Workplace assessments conducted", "required": False},
         {"id": "a14_prevention", "label": "Preventiemedewerker (prevention officer) appointed", "required": True},
     ]},
]

ARBOWET_STATUSES = ("compliant", "partial", "non_compliant", "na")


# ================================================================
# SE - SAM / OSA
# ================================================================

SAM_CATEGORIES = [
    {"id": "physical", "title": "Fysiska arbetsmiljörisker", "items": [
        {"id": "phy_noise", "label": "Buller (Noise)"},
        {"id": "phy_vibration", "label": "Vibrationer (Vibration)"},
        {"id": "phy_lighting", "label": "Belysning (Lighting)"},
        {"id": "phy_climate", "label": "Klimat (Climate)"},
        {"id": "phy_ergonomic", "label": "Ergonomi (Ergonomics)"},
        {"id": "phy_chemical", "label": "Kemiska risker (Chemical)"},
    ]},
    {"id": "accident", "title": "Olycksrisker (Accident Risks)", "items": [
        {"id": "acc_fall", "label": "Fallrisk (Fall hazard)"},
        {"id": "acc_machinery", "label": "Maskiner (Machinery)"},
        {"id": "acc_vehicles", "label": "Fordon (Vehicles)"},
        {"id": "acc_electrical", "label": "El (Electrical)"},
        {"id": "acc_fire", "label": "Brand (Fire)"},
        {"id": "acc_struck", "label": "Träffas av föremål (Struck-by)"},
    ]},
    {"id": "organizational", "title": "Organisatoriska faktorer", "items": [
        {"id": "org_workload", "label": "Arbetsbelastning (Workload)"},
        {"id": "org_workhours", "label": "Arbetstider (Working hours)"},
        {"id": "org_control", "label": "Inflytande (Control)"},
        {"id": "org_change", "label": "Förändring (Change)"},
    ]},
    {"id": "social", "title": "Sociala faktorer", "items": [
        {"id": "soc_harassment", "label": "Kränkande särbehandling (Harassment)"},
        {"id": "soc_violence", "label": "Hot och våld (Threats/Violence)"},
        {"id": "soc_solo", "label": "Ensamarbete (Solo work)"},
        {"id": "soc_support", "label": "Socialt stöd (Social support)"},
    ]},
]

OSA_SECTIONS = [
    {"id": "workload", "title": "Arbetsbelastning (Workload)", "questions": [
        {"id": "wl_demands", "label": "Work demands are reasonable"},
        {"id": "wl_pace", "label": "Work pace is manageable"},
        {"id": "wl_priority", "label": "Clear priorities are set"},
        {"id": "wl_resources", "label": "Adequate resources provided"},
        {"id": "wl_recovery", "label": "Recovery time available"},
    ]},
    {"id": "workhours", "title": "Arbetstid (Working Hours)", "questions": [
        {"id": "wh_schedule", "label": "Work schedule is predictable"},
        {"id": "wh_overtime", "label": "Overtime is reasonable"},
        {"id": "wh_shifts", "label": "Shift rotation is healthy"},
        {"id": "wh_oncall", "label": "On-call arrangements are fair"},
        {"id": "wh_flexibility", "label": "Work-life balance supported"},
    ]},
    {"id": "harassment", "title": "Kränkande särbehandling (Harassment)", "questions": [
        {"id": "hr_policy", "label": "Clear policy against harassment"},
        {"id": "hr_reporting", "label": "Safe reporting channels exist"},
        {"id": "hr_action", "label": "Reports are acted upon"},
        {"id": "hr_respect", "label": "Respectful workplace culture"},
        {"id": "hr_discrimination", "label": "No discrimination observed"},
    ]},
    {"id": "social", "title": "Socialt stöd (Social Support)", "questions": [
        {"id": "so_colleagues", "label": "Support from colleagues"},
        {"id": "so_manager", "label": "Support from manager"},
        {"id": "so_feedback", "label": "Regular feedback provided"},
        {"id": "so_recognition", "label": "Good work is recognized"},
        {"id": "so_development", "label": "Development opportunities exist"},
    ]},
    {"id": "control", "title": "Inflytande (Control/Autonomy)", "questions": [
        {"id": "co_methods", "label": "Control over work methods"},
        {"id": "co_schedule", "label": "Input on scheduling"},
        {"id": "co_decisions", "label": "Involved in decisions"},
        {"id": "co_creativity", "label": "Room for initiative"},
        {"id": "co_meaning", "label": "Work feels meaningful"},
    ]},
]


def _labels(categories, key="items"):
    return {item["id"]: item["label"] for cat in categories for item in cat[key]}


PPE_LABELS = {p["id"]: p["label"] for p in PPE_OPTIONS}
RIE_ITEM_LABELS = _labels(RIE_CATEGORIES)
SAM_ITEM_LABELS = _labels(SAM_CATEGORIES)


def forms_for_country(country: str):
    return [
        {"form_type": key, "code": code, "name": name}
        for key, (form_country, code, name) in FORM_TYPES.items()
        if form_country == country
    ]


def form_catalog(country: str = None):
    """Form list plus the item catalogs a client needs to render the forms."""
    forms = forms_for_country(country) if country else [
        {"form_type": key, "code": code, "name": name, "country": c}
        for key, (c, code, name) in FORM_TYPES.items()
    ]
    return {
        "forms": forms,
        "catalogs": {
            "ppe_options": PPE_OPTIONS,
            "hazard_types": HAZARD_TYPES,
            "jsa_checklist": JSA_CHECKLIST_CATEGORIES,
            "rie_categories": RIE_CATEGORIES,
            "arbowet_articles": ARBOWET_ARTICLES,
            "sam_categories": SAM_CATEGORIES,
            "osa_sections": OSA_SECTIONS,
        },
    }
