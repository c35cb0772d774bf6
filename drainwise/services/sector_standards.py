"""
Sector standards reference data.

Defines the industry standards that govern each of the six sectors. The
data is compiled in and read-only; it is used for display and for wording
the default description of new standard categories.
"""

SECTOR_STANDARDS = {
    'utilities': {
        'sectorName': 'Utilities',
        'sectorColor': '#3B82F6',
        'sectorIcon': 'Building',
        'standards': [
            {
                'name': 'MSCC5',
                'version': '5th Edition',
                'description': 'Manual of Sewer Condition Classification',
                'authority': 'WRc Group',
                'url': 'https://wrcgroup.com/products/mscc5',
            },
            {
                'name': 'SRM',
                'version': 'Latest Edition',
                'description': 'Sewerage Rehabilitation Manual',
                'authority': 'WRc Group',
                'url': 'https://wrcgroup.com/products/srm',
            },
            {
                'name': 'BS EN 752:2017',
                'description': 'Drain and sewer systems outside buildings - Sewer system management',
                'authority': 'BSI British Standards',
                'url': 'https://www.bsigroup.com/en-GB/standards/bs-en-752-2017/',
            },
            {
                'name': 'Water Industry Act 1991',
                'description': 'UK legislation governing water and sewerage undertakers',
                'authority': 'UK Parliament',
                'url': 'https://www.legislation.gov.uk/ukpga/1991/56',
            },
            {
                'name': 'WRc Drain Repair Book',
                'version': '4th Edition',
                'description': 'Comprehensive guide to drain repair methods and techniques',
                'authority': 'WRc Group',
                'url': 'https://wrcgroup.com/products/drain-repair-book',
            },
            {
                'name': 'WRc Sewer Cleaning Manual',
                'description': 'Best practices for sewer cleaning and maintenance',
                'authority': 'WRc Group',
                'url': 'https://wrcgroup.com/products/sewer-cleaning-manual',
            },
        ],
        'complianceNote': (
            'All observations and recommendations are assessed against WRc Group MSCC5 standards '
            'with cross-reference to BS EN 752:2017 requirements for utilities sector compliance.'
        ),
    },
    'adoption': {
        'sectorName': 'Adoption',
        'sectorColor': '#10B981',
        'sectorIcon': 'CheckCircle',
        'standards': [
            {
                'name': 'Sewers for Adoption',
                'version': '8th Edition',
                'description': 'Design and construction guide for adoptable sewers',
                'authority': 'Water UK',
                'url': 'https://www.water.org.uk/sewers-for-adoption/',
            },
            {
                'name': 'OS20x Series',
                'description': 'Operational Standards for new connections and adoptions',
                'authority': 'Water UK',
            },
            {
                'name': 'SSG',
                'description': 'Specification for the Sewerage Sector Guidance',
                'authority': 'Water UK',
            },
            {
                'name': 'DCSG',
                'description': "Developers' Code of Sewerage Guidance",
                'authority': 'Water UK',
            },
            {
                'name': 'BS EN 1610:2015',
                'description': 'Construction and testing of drains and sewers',
                'authority': 'BSI British Standards',
                'url': 'https://www.bsigroup.com/en-GB/standards/bs-en-1610-2015/',
            },
            {
                'name': 'Water Industry Act 1991',
                'description': 'Section 104 agreements and adoption procedures',
                'authority': 'UK Parliament',
                'url': 'https://www.legislation.gov.uk/ukpga/1991/56',
            },
        ],
        'complianceNote': (
            'All defects are assessed against Sewers for Adoption 8th Edition standards with '
            'adoptability determination based on OS20x compliance requirements.'
        ),
    },
    'highways': {
        'sectorName': 'Highways',
        'sectorColor': '#F59E0B',
        'sectorIcon': 'Car',
        'standards': [
            {
                'name': 'HADDMS',
                'description': 'Highway Asset Data and Data Management System',
                'authority': 'Department for Transport',
            },
            {
                'name': 'Design Manual for Roads and Bridges',
                'version': 'Current Edition',
                'description': 'UK standards for highway drainage design',
                'authority': 'Department for Transport',
                'url': 'https://www.standardsforhighways.co.uk/dmrb/',
            },
            {
                'name': 'BS EN 752:2017',
                'description': 'Drain and sewer systems outside buildings',
                'authority': 'BSI British Standards',
                'url': 'https://www.bsigroup.com/en-GB/standards/bs-en-752-2017/',
            },
            {
                'name': 'Highways Act 1980',
                'description': 'UK legislation governing highway drainage responsibilities',
                'authority': 'UK Parliament',
                'url': 'https://www.legislation.gov.uk/ukpga/1980/66',
            },
            {
                'name': 'Surface Water Management Guidelines',
                'description': 'Highway drainage and flood risk management',
                'authority': 'Department for Transport',
            },
        ],
        'complianceNote': (
            'All highway drainage defects are assessed against HADDMS criteria with compliance '
            'verification according to Design Manual for Roads and Bridges standards.'
        ),
    },
    'insurance': {
        'sectorName': 'Insurance',
        'sectorColor': '#EF4444',
        'sectorIcon': 'ShieldCheck',
        'standards': [
            {
                'name': 'ABI Guidelines',
                'description': 'Association of British Insurers drainage investigation standards',
                'authority': 'Association of British Insurers',
                'url': 'https://www.abi.org.uk/',
            },
            {
                'name': 'RICS Professional Standards',
                'description': 'Royal Institution of Chartered Surveyors drainage survey standards',
                'authority': 'RICS',
            },
            {
                'name': 'BS EN 752:2017',
                'description': 'Drain and sewer systems outside buildings',
                'authority': 'BSI British Standards',
                'url': 'https://www.bsigroup.com/en-GB/standards/bs-en-752-2017/',
            },
            {
                'name': 'Defects Analysis Protocol',
                'description': 'Insurance industry standard for defect classification and liability assessment',
                'authority': 'ABI Technical Committee',
            },
            {
                'name': 'Risk Assessment Framework',
                'description': 'Property damage risk evaluation for drainage defects',
                'authority': 'Insurance Industry Standards',
            },
        ],
        'complianceNote': (
            'All defects are assessed against ABI Guidelines with risk classification and '
            'liability determination according to insurance industry standards.'
        ),
    },
    'construction': {
        'sectorName': 'Construction',
        'sectorColor': '#8B5CF6',
        'sectorIcon': 'HardHat',
        'standards': [
            {
                'name': 'BS EN 1610:2015',
                'description': 'Construction and testing of drains and sewers',
                'authority': 'BSI British Standards',
                'url': 'https://www.bsigroup.com/en-GB/standards/bs-en-1610-2015/',
            },
            {
                'name': 'BS EN 752:2017',
                'description': 'Drain and sewer systems outside buildings',
                'authority': 'BSI British Standards',
                'url': 'https://www.bsigroup.com/en-GB/standards/bs-en-752-2017/',
            },
            {
                'name': 'CDM Regulations 2015',
                'description': 'Construction (Design and Management) Regulations',
                'authority': 'HSE',
                'url': 'https://www.hse.gov.uk/construction/cdm/2015/',
            },
            {
                'name': 'CIRIA Guidelines',
                'description': 'Construction Industry Research and Information Association drainage standards',
                'authority': 'CIRIA',
                'url': 'https://www.ciria.org/',
            },
            {
                'name': 'NHBC Standards',
                'description': 'National House Building Council technical standards',
                'authority': 'NHBC',
            },
        ],
        'complianceNote': (
            'All construction defects are assessed against BS EN 1610:2015 standards with '
            'compliance verification according to CDM Regulations and CIRIA guidelines.'
        ),
    },
    'domestic': {
        'sectorName': 'Domestic',
        'sectorColor': '#FBBF24',
        'sectorIcon': 'Home',
        'standards': [
            {
                'name': 'Building Regulations Part H',
                'description': 'Drainage and waste disposal for domestic properties',
                'authority': 'UK Government',
            },
            {
                'name': 'BS EN 752:2017',
                'description': 'Drain and sewer systems outside buildings',
                'authority': 'BSI British Standards',
                'url': 'https://www.bsigroup.com/en-GB/standards/bs-en-752-2017/',
            },
            {
                'name': 'Trading Standards Guidelines',
                'description': 'Consumer protection standards for domestic drainage work',
                'authority': 'Trading Standards',
                'url': 'https://www.tradingstandards.uk/',
            },
            {
                'name': 'Water Supply (Water Fittings) Regulations 1999',
                'description': 'UK regulations governing domestic water and drainage connections',
                'authority': 'UK Government',
                'url': 'https://www.legislation.gov.uk/uksi/1999/1148/contents/made',
            },
            {
                'name': 'Home Insurance Standards',
                'description': 'Domestic property drainage maintenance requirements',
                'authority': 'Insurance Industry',
            },
        ],
        'complianceNote': (
            'All domestic drainage defects are assessed against Building Regulations Part H with '
            'compliance verification according to Trading Standards guidelines.'
        ),
    },
}

# Checked in order, first keyword contained in the category name wins
CATEGORY_DESCRIPTIONS = (
    ('patching', 'Localized pipe repair and patching services according to WRc Drain Repair Book standards'),
    ('lining', 'Pipe lining installation services compliant with WRc Drain Rehabilitation Manual'),
    ('relining', 'Structural pipe relining services following WRc and MSCC5 standards'),
    ('excavation', 'Traditional excavation and repair services per WRc Drain Repair Book guidelines'),
    ('cctv', 'Closed-circuit television inspection services according to WRc standards'),
    ('cleaning', 'Drain and sewer cleaning services per WRc Drain & Sewer Cleaning Manual'),
    ('jetting', 'High-pressure water jetting services following WRc cleaning standards'),
    ('tankering', 'Waste removal and tankering services compliant with industry standards'),
    ('cutting', 'Precision cutting services according to WRc technical guidelines'),
    ('inspection', 'Comprehensive inspection services per MSCC5 and WRc standards'),
)


def get_sector_standards(sector):
    return SECTOR_STANDARDS.get(sector)


def get_all_sector_standards():
    return [dict(entry, sectorId=sector) for sector, entry in SECTOR_STANDARDS.items()]


def generate_standard_description(category_name):
    """
    Default description for a standard category.

    Args:
        category_name: Display name as entered by the user

    Returns:
        The template of the first keyword found in the lowercased name, or a
        generic sentence naming the category when nothing matches.
    """
    name = category_name.lower()
    for keyword, description in CATEGORY_DESCRIPTIONS:
        if keyword in name:
            return description
    return f"{category_name} services compliant with WRc Group standards and industry best practices"
