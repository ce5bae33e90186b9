"""Reference genotype tables and trait gene lists.

Each category maps a gene symbol to ``(rsid, {genotype: (impact, description)})``.
A ``"default"`` genotype applies to any call for that gene within the category.
"""

from athlete_insights.models.genetics import TraitDefinition

B, N, C = "beneficial", "neutral", "challenging"

CATEGORY_TABLES: dict[str, dict[str, tuple[str, dict[str, tuple[str, str]]]]] = {
    "Core Sleep markers": {
        "COMT": ("rs4680", {
            "GG": (B, "Better dopamine metabolism, improved sleep quality and cognitive function"),
            "GA": (N, "Moderate dopamine metabolism"),
            "AA": (C, "Slower dopamine metabolism, may affect sleep and stress response"),
        }),
        "PER3 VNTR": ("rs57875989", {
            "4/4": (B, "Morning chronotype, better sleep efficiency"),
            "4/5": (N, "Intermediate chronotype"),
            "5/5": (C, "Evening chronotype, may have sleep difficulties"),
        }),
        "CLOCK": ("rs1801260", {
            "TT": (B, "Better circadian rhythm regulation"),
            "TC": (N, "Moderate circadian regulation"),
            "CC": (C, "Evening preference, potential sleep issues"),
        }),
        "BDNF": ("rs6265", {
            "Val/Val": (B, "Enhanced neuroplasticity and sleep quality"),
            "Val/Met": (N, "Moderate neuroplasticity"),
            "Met/Met": (C, "Reduced neuroplasticity, may affect sleep recovery"),
        }),
        "PPARGC1A": ("rs8192678", {
            "GG": (B, "Enhanced mitochondrial function and sleep recovery"),
            "GA": (N, "Moderate mitochondrial function"),
            "AA": (C, "Reduced mitochondrial efficiency"),
        }),
        "ACTN3": ("rs1815739", {
            "RR": (B, "Fast-twitch fiber dominance, explosive power"),
            "RX": (N, "Mixed fiber types"),
            "XX": (B, "Slow-twitch fiber dominance, endurance focus"),
        }),
        "NOS3": ("rs1799983", {
            "TT": (B, "Optimal nitric oxide production"),
            "GT": (N, "Moderate nitric oxide production"),
            "GG": (C, "Reduced nitric oxide production"),
        }),
        "TPH2": ("rs4570625", {
            "CC": (B, "Optimal serotonin regulation"),
            "CT": (N, "Moderate serotonin regulation"),
            "TT": (C, "Altered serotonin regulation"),
        }),
        "GABRA6": ("rs3219151", {
            "GG": (B, "Enhanced GABA function, better sleep"),
            "GA": (N, "Moderate GABA function"),
            "AA": (C, "Reduced GABA function"),
        }),
        "GSK3B": ("", {"default": (N, "Glycogen synthase kinase regulation")}),
        "PER2": ("", {"default": (N, "Circadian rhythm regulation")}),
    },
    "Mental Health": {
        "COMT": ("rs4680", {
            "GG": (B, "Efficient dopamine metabolism, better stress response"),
            "GA": (N, "Balanced dopamine metabolism"),
            "AA": (C, "Slower dopamine clearance, may increase anxiety"),
        }),
        "SLC6A4 5-HTTLPR": ("rs4795541", {
            "LL": (B, "Efficient serotonin transport, better mood regulation"),
            "LS": (N, "Moderate serotonin transport"),
            "SS": (C, "Reduced serotonin transport, higher anxiety risk"),
        }),
        "TPH2": ("rs4570625", {
            "CC": (B, "Optimal serotonin synthesis"),
            "CT": (N, "Moderate serotonin synthesis"),
            "TT": (C, "Reduced serotonin synthesis"),
        }),
        "BDNF": ("rs6265", {
            "Val/Val": (B, "Enhanced neuroplasticity and resilience"),
            "Val/Met": (N, "Moderate neuroplasticity"),
            "Met/Met": (C, "Reduced neuroplasticity, higher depression risk"),
        }),
        "MAO-A": ("rs6323", {
            "TT": (B, "Balanced neurotransmitter metabolism"),
            "TC": (N, "Moderate metabolism"),
            "CC": (C, "Altered metabolism, potential mood issues"),
        }),
        "FKBP5": ("rs1360780", {
            "TT": (B, "Better stress response regulation"),
            "CT": (N, "Moderate stress response"),
            "CC": (C, "Heightened stress response"),
        }),
        "GABRA6": ("rs3219151", {
            "GG": (B, "Enhanced GABA function, anxiety reduction"),
            "GA": (N, "Moderate GABA function"),
            "AA": (C, "Reduced GABA function, higher anxiety"),
        }),
        "HTR1A": ("rs6295", {
            "GG": (B, "Better serotonin receptor function"),
            "GC": (N, "Moderate receptor function"),
            "CC": (C, "Reduced receptor function"),
        }),
        "OXTR": ("rs53576", {
            "GG": (B, "Enhanced social bonding and trust"),
            "GA": (N, "Moderate social bonding"),
            "AA": (C, "Reduced social bonding capacity"),
        }),
    },
    "Cardiovascular markers": {
        "APOE": ("rs429358", {
            "E2/E2": (B, "Lowest cardiovascular risk, better lipid metabolism"),
            "E2/E3": (B, "Low cardiovascular risk"),
            "E3/E3": (N, "Average cardiovascular risk"),
            "E2/E4": (N, "Moderate cardiovascular risk"),
            "E3/E4": (C, "Elevated cardiovascular risk"),
            "E4/E4": (C, "Highest cardiovascular risk"),
        }),
        "NOS3": ("rs1799983", {
            "TT": (B, "Optimal endothelial function and blood flow"),
            "GT": (N, "Moderate endothelial function"),
            "GG": (C, "Reduced endothelial function"),
        }),
        "ACE": ("rs4341", {
            "II": (B, "Lower blood pressure, better endurance"),
            "ID": (N, "Moderate ACE activity"),
            "DD": (C, "Higher blood pressure, power advantage"),
        }),
        "AGT": ("rs699", {
            "CC": (B, "Lower angiotensinogen levels"),
            "CT": (N, "Moderate angiotensinogen levels"),
            "TT": (C, "Higher angiotensinogen levels"),
        }),
        "ADRB2": ("rs1042713", {
            "GG": (B, "Better bronchodilation and cardiovascular response"),
            "GA": (N, "Moderate response"),
            "AA": (C, "Reduced bronchodilation"),
        }),
        "MTHFR C677T": ("rs1801133", {
            "CC": (B, "Normal homocysteine metabolism"),
            "CT": (N, "Moderate homocysteine elevation risk"),
            "TT": (C, "Elevated homocysteine risk"),
        }),
        "LPA": ("rs3798220", {
            "low": (B, "Lower cardiovascular risk"),
            "high": (C, "Elevated cardiovascular risk"),
        }),
        "CRP": ("rs1205", {
            "CC": (B, "Lower inflammation risk"),
            "CG": (N, "Moderate inflammation risk"),
            "GG": (C, "Higher inflammation risk"),
        }),
    },
    "Metabolic Health": {
        "TCF7L2": ("rs7903146", {
            "TT": (B, "Lower type 2 diabetes risk"),
            "CT": (N, "Moderate diabetes risk"),
            "CC": (C, "Elevated type 2 diabetes risk"),
        }),
        "PPARG": ("rs1801282", {
            "CC": (B, "Better insulin sensitivity"),
            "CG": (N, "Moderate insulin sensitivity"),
            "GG": (C, "Reduced insulin sensitivity"),
        }),
        "FTO": ("rs9939609", {
            "AA": (B, "Lower obesity risk"),
            "AT": (N, "Moderate obesity risk"),
            "TT": (C, "Elevated obesity risk"),
        }),
        "MC4R": ("rs17782313", {
            "CC": (B, "Better appetite regulation"),
            "CT": (N, "Moderate appetite control"),
            "TT": (C, "Reduced appetite regulation"),
        }),
        "ADIPOQ": ("rs266729", {
            "GG": (B, "Better adiponectin function"),
            "GA": (N, "Moderate adiponectin function"),
            "AA": (C, "Reduced adiponectin function"),
        }),
        "SLC2A2": ("rs5400", {
            "GG": (B, "Better glucose transport"),
            "GA": (N, "Moderate glucose transport"),
            "AA": (C, "Reduced glucose transport"),
        }),
        "MTNR1B": ("rs10830963", {
            "GG": (B, "Lower diabetes risk"),
            "GC": (N, "Moderate diabetes risk"),
            "CC": (C, "Elevated diabetes risk"),
        }),
        "GCK": ("rs1799884", {
            "AA": (B, "Normal glucose sensing"),
            "AG": (N, "Moderate glucose sensing"),
            "GG": (C, "Altered glucose sensing"),
        }),
    },
    "Power and Strength": {
        "ACE": ("rs4341", {
            "DD": (B, "Power advantage, better strength gains"),
            "ID": (N, "Balanced power/endurance"),
            "II": (B, "Endurance advantage"),
        }),
        "ACTN3": ("rs1815739", {
            "RR": (B, "Elite power genetics, fast-twitch dominance"),
            "RX": (N, "Mixed fiber types"),
            "XX": (B, "Endurance genetics, slow-twitch dominance"),
        }),
        "AGT": ("rs699", {
            "TT": (B, "Better strength potential"),
            "CT": (N, "Moderate strength potential"),
            "CC": (C, "Reduced strength potential"),
        }),
        "CKM": ("rs8111989", {
            "AA": (B, "Enhanced creatine kinase activity"),
            "AG": (N, "Moderate creatine kinase activity"),
            "GG": (C, "Reduced creatine kinase activity"),
        }),
        "IL6": ("rs1800795", {
            "CC": (B, "Better inflammation control"),
            "CG": (N, "Moderate inflammation control"),
            "GG": (C, "Higher inflammation risk"),
        }),
        "NOS3": ("rs1799983", {
            "TT": (B, "Optimal blood flow to muscles"),
            "GT": (N, "Moderate blood flow"),
            "GG": (C, "Reduced blood flow"),
        }),
        "PPARA": ("rs4253778", {
            "GG": (B, "Enhanced fat metabolism"),
            "GA": (N, "Moderate fat metabolism"),
            "AA": (C, "Reduced fat metabolism"),
        }),
        "PPARGC1A": ("rs8192678", {
            "GG": (B, "Superior mitochondrial function"),
            "GA": (N, "Moderate mitochondrial function"),
            "AA": (C, "Reduced mitochondrial function"),
        }),
        "SOD2": ("rs4880", {
            "TT": (B, "Better antioxidant protection"),
            "CT": (N, "Moderate antioxidant protection"),
            "CC": (C, "Reduced antioxidant protection"),
        }),
    },
    "Endurance Capability": {
        "ACE": ("rs4341", {
            "II": (B, "Superior endurance capacity"),
            "ID": (N, "Balanced capacity"),
            "DD": (B, "Power advantage"),
        }),
        "ACTN3": ("rs1815739", {
            "XX": (B, "Elite endurance genetics"),
            "RX": (N, "Mixed capacity"),
            "RR": (B, "Power genetics"),
        }),
        "COMT": ("rs4680", {
            "GG": (B, "Better pain tolerance"),
            "GA": (N, "Moderate pain tolerance"),
            "AA": (C, "Lower pain tolerance"),
        }),
        "CRP": ("rs1205", {
            "CC": (B, "Lower chronic inflammation"),
            "CG": (N, "Moderate inflammation"),
            "GG": (C, "Higher chronic inflammation"),
        }),
        "DRD4": ("rs1800955", {
            "4R/4R": (B, "Better focus and endurance"),
            "4R/7R": (N, "Moderate focus"),
            "7R/7R": (C, "Reduced focus capacity"),
        }),
        "HFE": ("rs1799945", {
            "CC": (B, "Normal iron metabolism"),
            "CG": (N, "Moderate iron metabolism"),
            "GG": (C, "Altered iron metabolism"),
        }),
        "PPARA": ("rs4253778", {
            "GG": (B, "Enhanced aerobic capacity"),
            "GA": (N, "Moderate aerobic capacity"),
            "AA": (C, "Reduced aerobic capacity"),
        }),
        "UCP3": ("rs1800849", {
            "CC": (B, "Better energy efficiency"),
            "CT": (N, "Moderate energy efficiency"),
            "TT": (C, "Reduced energy efficiency"),
        }),
        "VEGFA": ("rs2010963", {
            "CC": (B, "Enhanced angiogenesis"),
            "CT": (N, "Moderate angiogenesis"),
            "TT": (C, "Reduced angiogenesis"),
        }),
    },
    "Injury Risk": {
        "COL1A1": ("rs1800012", {
            "GG": (B, "Stronger collagen structure"),
            "GT": (N, "Moderate collagen strength"),
            "TT": (C, "Weaker collagen structure"),
        }),
        "COL5A1": ("rs12722", {
            "CC": (B, "Better tendon integrity"),
            "CT": (N, "Moderate tendon integrity"),
            "TT": (C, "Higher tendon injury risk"),
        }),
        "GDF5": ("rs143383", {
            "TT": (B, "Better joint health"),
            "TC": (N, "Moderate joint health"),
            "CC": (C, "Higher joint injury risk"),
        }),
    },
    "Recovery & Adaptation": {
        "PPARGC1A": ("rs8192678", {
            "GG": (B, "Superior recovery capacity"),
            "GA": (N, "Moderate recovery capacity"),
            "AA": (C, "Reduced recovery capacity"),
        }),
        "BDNF": ("rs6265", {
            "Val/Val": (B, "Enhanced adaptation and learning"),
            "Val/Met": (N, "Moderate adaptation"),
            "Met/Met": (C, "Reduced adaptation capacity"),
        }),
        "COMT": ("rs4680", {
            "GG": (B, "Better stress recovery"),
            "GA": (N, "Moderate stress recovery"),
            "AA": (C, "Slower stress recovery"),
        }),
    },
}


def _traits(entries: list[tuple[str, list[str]]]) -> list[TraitDefinition]:
    return [TraitDefinition(name=name, genes=genes) for name, genes in entries]


# Composite squad traits scored on the genetics overview
SQUAD_TRAITS = _traits([
    ("Scrum/Collision Power", ["ACTN3", "ACE", "AGT", "CKM", "PPARGC1A", "PPARA", "IL6", "SOD2", "NOS3"]),
    ("Sprint Repeatability", ["ACE", "ACTN3", "PPARA", "UCP3", "VEGFA", "CRP", "COMT"]),
    ("Recovery Capacity", ["PPARGC1A", "BDNF", "COMT", "NOS3"]),
    ("Tissue Integrity Risk", ["COL1A1", "COL5A1", "GDF5", "IL6"]),
    ("Concussion/Contact Risk", ["APOE", "MTHFR C677T", "PEMT", "CRP"]),
])

# Health subcategories always listed in the overview, with coverage counters
HEALTH_CATEGORIES = _traits([
    ("Core Sleep", ["COMT", "PER3", "CLOCK", "BDNF", "PPARGC1A", "ACTN3", "NOS3", "TPH2", "GABRA6", "GSK3B", "PER2"]),
    ("Mental Health", ["COMT", "SLC6A4", "TPH2", "BDNF", "MAO-A", "FKBP5", "GABRA6", "HTR1A", "OXTR"]),
    ("Cardiovascular", ["APOE", "NOS3", "ACE", "AGT", "ADRB2", "MTHFR", "LPA", "CRP"]),
    ("Metabolic Health", ["TCF7L2", "PPARG", "FTO", "MC4R", "ADIPOQ", "SLC2A2", "MTNR1B", "GCK"]),
    ("Power and Strength", ["ACTN3", "ACE", "AGT", "CKM", "IL6", "NOS3", "PPARA", "PPARGC1A", "SOD2"]),
    ("Endurance Capability", ["ACE", "ACTN3", "COMT", "CRP", "DRD4", "HFE", "PPARA", "UCP3", "VEGFA"]),
    ("Knee injury Risk", ["COL1A1", "GDF5"]),
    ("Achilles Tendonitis Risk", ["COL5A1"]),
    ("Bone and Joint Health Risk", ["COL6A4P1", "IL1R1", "MCF2L", "VDR", "CYP2R1", "NADSYN1", "GC"]),
    ("Lower Back Pain risk", ["CILP", "COL11A1", "COL9A3"]),
    ("Soft tissue Injury Risk", ["AMPD1", "GDF5", "INS-IGF2"]),
    ("General Injury risk", ["COL5A1", "GDF5", "COL1A1"]),
    ("Anxiety risk", ["COMT", "SLC6A4", "TPH2", "BDNF", "MAO-A", "FKBP5", "HTR1A", "IL1B", "OPRM1", "OXTR"]),
    ("Cognitive Memory", ["ANK3", "APOE", "BDNF", "CACNA1C", "CETP", "DRD2", "TNF"]),
    ("Dopamine Reward", ["ANKK1", "CACNA1C", "COMT", "DRD2", "DRD4"]),
    ("HRV/Autonomic Stress", ["ADRB1", "ADRB2", "ACE", "NOS3", "CHRM2", "RGS6"]),
    ("Methylation Pathways", [
        "MTHFR", "MTRR", "MTR", "BHMT-02", "CBS", "SHMT1", "PEMT", "SLC19A1", "TCN2",
        "MTHFD1", "FUT2", "MAT1A", "TPH2", "VDR", "GSTM1", "GSTP1", "GSTT1",
    ]),
    ("Detox Phase 1", ["CYP1A1", "CYP1A2", "CYP1B1", "CYP2A6", "CYP2D6"]),
    ("Detox Phase 2", ["GSTM1", "GSTP1", "GSTT1", "NAT2", "NQO1", "SULT1A1"]),
    ("Caffeine Metabolism", ["CYP1A2", "AHR", "POR", "ADORA2A"]),
    ("Estrogen Metabolism", ["COMT", "CYP17A1", "CYP19A1", "GSTM1", "GSTT1"]),
    ("Sex hormone Metabolism", ["COMT", "CYP1A1", "CYP1B1", "SULT1A1"]),
    ("Vitamin B12 / Pernicious Anaemia", ["FUT2", "MTR"]),
    ("Gluten Sensitivity", ["TNF"]),
    ("Altitude Training Response", ["ACE", "ADRB2", "NOS3", "PPARA"]),
    ("Salt Sensitivity", ["ACE", "AGT"]),
    ("Airway and Allergy", ["ADRB2", "IL4", "IL13", "FCER1A", "TSLP", "FLG", "HRH1", "HRH4"]),
    ("Bone Health Density", ["DBP", "VDR"]),
    ("Inflammatory / Infection Response", [
        "IL6", "TNF", "TLR4", "HLA-DQA1", "HLA-DQB1", "HLA-DRB1", "PON1", "SH2B3", "PTPN22",
        "SLC23A1", "GPX1", "FOXO3", "IL1B", "IRF5", "SOCS2", "CRP", "GSTA1", "IL17A", "IL1A",
        "IL1RN", "HMOX1",
    ]),
    ("Lactate Threshold", ["ACTN3", "AMPD1", "PPARGC1A", "VEGFA"]),
    ("Energy production during Exercise", ["AMPD1", "GABPB1", "PPARA", "PPARGC1A"]),
    ("Muscle building", [
        "ACTN3", "ACE", "MYH7", "MSTN", "FST", "ACVR2B", "IGF1", "COL1A1", "COL5A1", "VDR",
        "AR", "CYP19A1", "SHBG", "IL6", "TNF", "SOD2",
    ]),
    ("Blood Clotting Risk", ["F2", "F5"]),
    ("Blood Flow and Circulation", ["ACE", "ADRB2", "AGT", "BDKRB2", "NOS3"]),
    ("Blood pressure Regulation", ["ACE", "ADRB1", "AGT", "NOS3"]),
    ("Haemochromatosis Risk", ["HFE"]),
    ("Concussion Risk", ["APOE", "MTHFR", "PEMT"]),
])
