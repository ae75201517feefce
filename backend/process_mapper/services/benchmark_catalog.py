"""Industry benchmark catalog.

Reference data describing the processes, canonical interactions, risks and
KPIs typical of an industry.  Entries are frozen and the catalog is a tuple,
so nothing downstream can mutate them at runtime.

Catalog order matters: the industry resolver returns the first entry whose
label matches, so keep the order stable when adding industries.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BenchmarkInteraction:
    from_process: str
    to_process: str
    type: str  # information / material / service / feedback
    description: str
    frequency: str  # continuous / daily / weekly / monthly / as-needed


@dataclass(frozen=True)
class IndustryBenchmark:
    industry: str
    core: tuple[str, ...]
    support: tuple[str, ...]
    management: tuple[str, ...]
    key_interactions: tuple[BenchmarkInteraction, ...] = ()
    risks: tuple[str, ...] = ()
    kpis: tuple[str, ...] = ()


MANUFACTURING = IndustryBenchmark(
    industry="Manufacturing",
    core=(
        "Product Design & Development",
        "Production Planning",
        "Procurement & Supplier Management",
        "Manufacturing & Assembly",
        "Quality Control & Testing",
        "Packaging & Labeling",
        "Warehousing & Inventory",
        "Order Fulfillment & Shipping",
        "Customer Service & Support",
    ),
    support=(
        "Human Resources Management",
        "Information Technology Support",
        "Maintenance & Facilities",
        "Health & Safety Management",
        "Environmental Management",
        "Training & Development",
        "Document Control",
        "Calibration & Metrology",
    ),
    management=(
        "Strategic Planning",
        "Quality Management System",
        "Risk Management",
        "Management Review",
        "Internal Audit",
        "Corrective & Preventive Actions",
        "Continuous Improvement",
        "Performance Monitoring",
    ),
    key_interactions=(
        BenchmarkInteraction(
            "Product Design & Development", "Production Planning", "information",
            "Product specifications, BOM, manufacturing requirements", "as-needed",
        ),
        BenchmarkInteraction(
            "Production Planning", "Procurement & Supplier Management", "information",
            "Material requirements, delivery schedules", "weekly",
        ),
        BenchmarkInteraction(
            "Procurement & Supplier Management", "Manufacturing & Assembly", "material",
            "Raw materials, components, supplies", "continuous",
        ),
        BenchmarkInteraction(
            "Manufacturing & Assembly", "Quality Control & Testing", "material",
            "Finished products for inspection", "continuous",
        ),
        BenchmarkInteraction(
            "Quality Control & Testing", "Packaging & Labeling", "material",
            "Approved products with certificates", "continuous",
        ),
        BenchmarkInteraction(
            "Customer Service & Support", "Product Design & Development", "feedback",
            "Customer feedback, complaints, improvement suggestions", "monthly",
        ),
    ),
    risks=(
        "Supply chain disruption",
        "Equipment failure/downtime",
        "Quality defects reaching customers",
        "Regulatory non-compliance",
        "Workplace safety incidents",
    ),
    kpis=(
        "Overall Equipment Effectiveness (OEE)",
        "First Pass Yield",
        "Customer Complaint Rate",
        "On-Time Delivery",
        "Inventory Turnover",
    ),
)

SOFTWARE_DEVELOPMENT = IndustryBenchmark(
    industry="Software Development",
    core=(
        "Requirements Analysis",
        "System Architecture & Design",
        "Software Development",
        "Code Review & Testing",
        "Integration & Deployment",
        "Release Management",
        "Customer Support",
        "Product Management",
    ),
    support=(
        "Infrastructure Management",
        "Security & Compliance",
        "Human Resources",
        "Training & Development",
        "Vendor Management",
        "Legal & Contracts",
        "Marketing & Sales Support",
    ),
    management=(
        "Project Management",
        "Quality Assurance",
        "Risk Management",
        "Performance Management",
        "Strategic Planning",
        "Process Improvement",
        "Management Review",
    ),
    key_interactions=(
        BenchmarkInteraction(
            "Requirements Analysis", "System Architecture & Design", "information",
            "Functional and non-functional requirements", "as-needed",
        ),
        BenchmarkInteraction(
            "System Architecture & Design", "Software Development", "information",
            "Technical specifications, design documents", "as-needed",
        ),
        BenchmarkInteraction(
            "Software Development", "Code Review & Testing", "material",
            "Source code, builds, documentation", "daily",
        ),
        BenchmarkInteraction(
            "Customer Support", "Requirements Analysis", "feedback",
            "Bug reports, feature requests, user feedback", "weekly",
        ),
    ),
    risks=(
        "Security vulnerabilities",
        "Performance degradation",
        "Data breaches",
        "Scope creep",
        "Technical debt accumulation",
    ),
    kpis=(
        "Code Coverage",
        "Bug Escape Rate",
        "Customer Satisfaction Score",
        "Time to Market",
        "System Uptime",
    ),
)

HEALTHCARE_SERVICES = IndustryBenchmark(
    industry="Healthcare Services",
    core=(
        "Patient Registration & Admission",
        "Clinical Assessment & Diagnosis",
        "Treatment Planning",
        "Care Delivery",
        "Medication Management",
        "Patient Monitoring",
        "Discharge Planning",
        "Follow-up Care",
    ),
    support=(
        "Medical Records Management",
        "Pharmacy Services",
        "Laboratory Services",
        "Radiology Services",
        "Facilities Management",
        "Supply Chain Management",
        "Infection Control",
        "Waste Management",
    ),
    management=(
        "Quality Assurance",
        "Risk Management",
        "Compliance Management",
        "Staff Management",
        "Performance Improvement",
        "Patient Safety Management",
        "Emergency Preparedness",
    ),
    key_interactions=(
        BenchmarkInteraction(
            "Patient Registration & Admission", "Clinical Assessment & Diagnosis", "information",
            "Patient demographics, insurance, medical history", "continuous",
        ),
        BenchmarkInteraction(
            "Clinical Assessment & Diagnosis", "Treatment Planning", "information",
            "Diagnosis results, clinical findings", "continuous",
        ),
        BenchmarkInteraction(
            "Treatment Planning", "Care Delivery", "information",
            "Treatment protocols, care plans", "continuous",
        ),
    ),
    risks=(
        "Medical errors",
        "Healthcare-associated infections",
        "Patient safety incidents",
        "Regulatory violations",
        "Data privacy breaches",
    ),
    kpis=(
        "Patient Satisfaction Score",
        "Infection Rate",
        "Average Length of Stay",
        "Readmission Rate",
        "Patient Safety Indicators",
    ),
)

FINANCIAL_SERVICES = IndustryBenchmark(
    industry="Financial Services",
    core=(
        "Customer Onboarding",
        "Account Management",
        "Transaction Processing",
        "Credit Assessment",
        "Risk Assessment",
        "Investment Management",
        "Claims Processing",
        "Customer Service",
    ),
    support=(
        "IT Systems Management",
        "Compliance & Regulatory Reporting",
        "Human Resources",
        "Facilities Management",
        "Vendor Management",
        "Security Management",
        "Document Management",
    ),
    management=(
        "Risk Management",
        "Audit & Compliance",
        "Performance Management",
        "Strategic Planning",
        "Business Continuity",
        "Change Management",
    ),
    key_interactions=(
        BenchmarkInteraction(
            "Customer Onboarding", "Account Management", "information",
            "Customer data, account setup, KYC documentation", "as-needed",
        ),
        BenchmarkInteraction(
            "Credit Assessment", "Risk Assessment", "information",
            "Credit scores, financial data, risk ratings", "as-needed",
        ),
    ),
    risks=(
        "Fraud and financial crime",
        "Regulatory non-compliance",
        "Data security breaches",
        "Market volatility",
        "Operational risk",
    ),
    kpis=(
        "Customer Acquisition Cost",
        "Net Promoter Score",
        "Compliance Rating",
        "Risk-Adjusted Return",
        "Processing Time",
    ),
)

CONSULTING = IndustryBenchmark(
    industry="Consulting",
    core=(
        "Business Development & Proposals",
        "Client Engagement & Contracting",
        "Discovery & Needs Assessment",
        "Solution Design",
        "Engagement Delivery",
        "Deliverable Review & Acceptance",
        "Client Reporting",
        "Engagement Closure",
    ),
    support=(
        "Knowledge Management",
        "Resource Planning & Staffing",
        "Human Resources",
        "Training & Development",
        "Billing & Time Tracking",
        "IT Support",
        "Document Control",
    ),
    management=(
        "Strategic Planning",
        "Quality Management",
        "Risk Management",
        "Management Review",
        "Client Satisfaction Review",
        "Continuous Improvement",
    ),
    key_interactions=(
        BenchmarkInteraction(
            "Business Development & Proposals", "Client Engagement & Contracting", "information",
            "Accepted proposals, scope, commercial terms", "as-needed",
        ),
        BenchmarkInteraction(
            "Discovery & Needs Assessment", "Solution Design", "information",
            "Findings, stakeholder requirements, constraints", "as-needed",
        ),
        BenchmarkInteraction(
            "Engagement Delivery", "Deliverable Review & Acceptance", "service",
            "Draft deliverables for quality review", "weekly",
        ),
        BenchmarkInteraction(
            "Engagement Closure", "Business Development & Proposals", "feedback",
            "Lessons learned, client references, follow-on opportunities", "as-needed",
        ),
    ),
    risks=(
        "Scope creep and unbilled effort",
        "Key consultant unavailability",
        "Deliverables not meeting client expectations",
        "Confidentiality breaches",
        "Conflicts of interest",
    ),
    kpis=(
        "Utilization Rate",
        "Client Satisfaction Score",
        "Project Margin",
        "On-Time Deliverable Rate",
        "Repeat Business Rate",
    ),
)

INDUSTRY_BENCHMARKS: tuple[IndustryBenchmark, ...] = (
    MANUFACTURING,
    SOFTWARE_DEVELOPMENT,
    HEALTHCARE_SERVICES,
    FINANCIAL_SERVICES,
    CONSULTING,
)


def get_benchmark_by_label(label: str) -> IndustryBenchmark | None:
    """Return the catalog entry whose label matches exactly."""
    for benchmark in INDUSTRY_BENCHMARKS:
        if benchmark.industry == label:
            return benchmark
    return None


def list_industries() -> list[str]:
    return [b.industry for b in INDUSTRY_BENCHMARKS]
