"""
Static option dictionaries for PR2 pricing configurations.

Each configuration carries four option sections. A section is a dynamic
map of option key -> {enabled, value}; the keys below are the ones the
pricing form offers out of the box, users may add their own at runtime.
"""

SECTIONS = {
    'pricing': {'column': 'pricing_options', 'title': 'Price/Cost Options'},
    'quantity': {'column': 'quantity_options', 'title': 'Quantity Options'},
    'minQuantity': {'column': 'min_quantity_options', 'title': 'Min Quantity Options'},
    'additional': {'column': 'additional_options', 'title': 'Additional Options'},
}

KNOWN_OPTIONS = {
    'pricing': [
        ('dayRate', 'Day Rate'),
        ('hourlyRate', 'Hourly Rate'),
        ('setupRate', 'Setup Rate'),
        ('meterageRate', 'Per Meter Rate'),
    ],
    'quantity': [
        ('runsPerShift', 'Runs per Shift'),
        ('metersPerShift', 'Meters per Shift'),
        ('sectionsPerDay', 'Sections per Day'),
    ],
    'minQuantity': [
        ('minRuns', 'Min Runs'),
        ('minMeters', 'Min Meters'),
        ('minSetup', 'Min Setup'),
    ],
    'additional': [
        ('includeDepth', 'Include Depth'),
        ('includeTotalLength', 'Include Total Length'),
        ('pipeSize', 'Pipe Size'),
        ('percentage', 'Percentage'),
    ],
}

MATH_OPERATORS = ('N/A', '+', '-', '×', '÷')

SECTORS = ('utilities', 'adoption', 'highways', 'insurance', 'construction', 'domestic')

# MSCC5 standard pipe diameters in millimetres
MSCC5_PIPE_SIZES = (
    '100', '150', '200', '225', '300', '375',
    '450', '525', '600', '675', '750', '900',
    '1050', '1200', '1500',
)

VEHICLE_TYPES = ('3.5t Van', '5t Van', '7.5t Truck', '18t Truck', '26t Truck', '32t Truck')

DEFAULT_CATEGORY_COLOR = '#ffffff'
AUTO_DETECT_FALLBACK_COLOR = '#93c5fd'
DEFAULT_PIPE_SIZE = '150'
DEFAULT_SECTOR = 'utilities'
DEFAULT_MATH_OPERATORS = ('N/A',)
DEFAULT_CATEGORY_NAME = 'New Clean Configuration'


def section_column(section):
    """Model attribute holding the options map for a section, or None."""
    entry = SECTIONS.get(section)
    return entry['column'] if entry else None


def default_options(section):
    """Blank option map for a section with every known key disabled."""
    return {key: {'enabled': False, 'value': ''} for key, _ in KNOWN_OPTIONS.get(section, [])}


def option_label(section, key):
    for known_key, label in KNOWN_OPTIONS.get(section, []):
        if known_key == key:
            return label
    return key


def empty_stack_order():
    return {section: [] for section in SECTIONS}


def registry_snapshot():
    """Everything the pricing form needs to render an empty configuration."""
    return {
        'sections': [
            {
                'section': section,
                'title': meta['title'],
                'options': [{'key': key, 'label': label} for key, label in KNOWN_OPTIONS[section]],
            }
            for section, meta in SECTIONS.items()
        ],
        'mathOperators': list(MATH_OPERATORS),
        'sectors': list(SECTORS),
        'pipeSizes': list(MSCC5_PIPE_SIZES),
        'vehicleTypes': list(VEHICLE_TYPES),
        'defaults': {
            'categoryColor': DEFAULT_CATEGORY_COLOR,
            'pipeSize': DEFAULT_PIPE_SIZE,
            'sector': DEFAULT_SECTOR,
            'mathOperators': list(DEFAULT_MATH_OPERATORS),
        },
    }
