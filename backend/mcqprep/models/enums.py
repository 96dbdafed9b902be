from enum import Enum


class SubscriptionType(str, Enum):
    FREE = "free"
    PREMIUM = "premium"


class Topic(str, Enum):
    GENERAL_SURGERY = "General Surgery"
    GI_SURGERY = "GI Surgery"
    UROLOGY = "Urology"
    PEDIATRIC_SURGERY = "Pediatric Surgery"
    CARDIOTHORACIC_SURGERY = "Cardiothoracic Surgery"
    NEUROSURGERY = "Neurosurgery"
    ORTHOPEDICS = "Orthopedics"
    PLASTIC_SURGERY = "Plastic Surgery"
    VASCULAR_SURGERY = "Vascular Surgery"
    TRAUMA_SURGERY = "Trauma Surgery"
    ONCOLOGY = "Oncology"
    ENDOCRINE_SURGERY = "Endocrine Surgery"
    HEPATOBILIARY_SURGERY = "Hepatobiliary Surgery"
    TRANSPLANT_SURGERY = "Transplant Surgery"
    EMERGENCY_SURGERY = "Emergency Surgery"
    SURGICAL_ANATOMY = "Surgical Anatomy"
    SURGICAL_PATHOLOGY = "Surgical Pathology"
    SURGICAL_PHYSIOLOGY = "Surgical Physiology"
    PERIOPERATIVE_CARE = "Pre and Post Operative Care"
    SURGICAL_INSTRUMENTS = "Surgical Instruments"
    ANESTHESIA = "Anesthesia"
    OTHER = "Other"


class Difficulty(str, Enum):
    BASIC = "Basic"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class TestDifficulty(str, Enum):
    BASIC = "Basic"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"
    MIXED = "Mixed"


class TestCategory(str, Enum):
    NEET_SS = "NEET SS"
    INI_SS = "INI SS"
    MCH = "MCH"
    TOPIC_WISE = "Topic Wise"
    MIXED = "Mixed"


class TargetExam(str, Enum):
    NEET_SS = "NEET SS"
    INI_SS = "INI SS"
    MCH = "MCH"
    OTHER = "Other"


class AttemptType(str, Enum):
    PRACTICE = "practice"
    MOCK_TEST = "mock_test"


class DiscussionCategory(str, Enum):
    DOUBT = "doubt"
    GENERAL = "general"
    STUDY_MATERIAL = "study_material"
    EXAM_STRATEGY = "exam_strategy"
    OTHER = "other"
