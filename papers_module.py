"""Publication list for the portfolio page.

Paper metadata is hardcoded below. When a PDF is not in the list, its
details are guessed from the filename, and optionally refined by reading
the PDF itself with pypdf.
"""
import logging
import os
import re

from pypdf import PdfReader
from pypdf.errors import PdfReadError

logger = logging.getLogger(__name__)

DEFAULT_AUTHOR = 'Griffin Goodwin'
ABSTRACT_PREVIEW_LENGTH = 200
ABSTRACT_MAX_LENGTH = 1000
PDF_SCAN_PAGES = 3

NO_PAPERS_MESSAGE = 'No papers found.'
PAPERS_ERROR_MESSAGE = 'Error loading papers. Please try again later.'

PAPERS = [
    {
        'path': 'Papers/2510.22801v1.pdf',
        'title': 'FOXES: A Framework For Operational X-ray Emission Synthesis',
        'authors': 'Griffin T. Goodwin, Jayant Biradar, Alison J. March, Christoph Schirninger, '
                   'Robert Jarolim, Angelos Vourlidas, Lorien Pratt',
        'publication_info': 'arXiv:2510.22801',
        'abstract': (
            'Understanding solar flares is critical for predicting space weather, as their activity '
            'shapes how the Sun influences Earth and its environment. The development of reliable '
            'forecasting methodologies of these events depends on robust flare catalogs, but current '
            'methods are limited to flare classification using integrated soft X-ray emission that '
            'are available only from Earth’s perspective. This reduces accuracy in pinpointing '
            'the location and strength of farside flares and their connection to geoeffective events. '
            'In this work, we introduce a Vision Transformer (ViT)-based approach that translates '
            'Extreme Ultraviolet (EUV) observations into soft x-ray flux while also setting the '
            'groundwork for estimating flare locations in the future. The model achieves accurate '
            'flux predictions across flare classes using quantitative metrics. This paves the way '
            'for EUV-based flare detection to be extended beyond Earth’s line of sight, which '
            'allows for a more comprehensive and complete solar flare catalog.'
        ),
    },
    {
        'path': 'Papers/Goodwin_2025_ApJ_981_200.pdf',
        'title': 'The Impacts of Magnetogram Projection Effects on Solar Flare Forecasting',
        'authors': 'Griffin T. Goodwin, Viachyslav M. Sadykov, and Petrus C. Martens',
        'publication_info': 'ApJ 2025, 981, 200',
        'abstract': (
            'This work explores the impacts of magnetogram projection effects on '
            'machine-learning-based solar flare forecasting models. Utilizing a methodology proposed '
            'by D. A. Falconer et al., we correct for projection effects present in Georgia State '
            'University’s Space Weather Analytics for Solar Flares benchmark data set. We then '
            'train and test a support vector machine classifier on the corrected and uncorrected '
            'data, comparing differences in performance. Additionally, we provide insight into '
            'several other methodologies that mitigate projection effects, such as stacking ensemble '
            'classifiers and active region location-informed models. Our analysis shows that data '
            'corrections slightly increase both the true-positive (correctly predicted flaring '
            'samples) and false-positive (nonflaring samples predicted as flaring) prediction rates, '
            'averaging a few percent. Similarly, changes in performance metrics are minimal for the '
            'stacking ensemble and location-based model. This suggests that a more complicated '
            'correction methodology may be needed to see improvements. It may also indicate inherent '
            'limitations when using magnetogram data for flare forecasting.'
        ),
    },
    {
        'path': 'Papers/Goodwin_2024_ApJ_964_163.pdf',
        'title': 'Investigating Performance Trends of Simulated Real-time Solar Flare Predictions: '
                 'The Impacts of Training Windows, Data Volumes, and the Solar Cycle',
        'authors': 'Griffin T. Goodwin, Viachyslav M. Sadykov, and Petrus C. Martens',
        'publication_info': 'ApJ 2024, 964, 163',
        'abstract': (
            'This study explores the behavior of machine-learning-based flare forecasting models '
            'deployed in a simulated operational environment. Using Georgia State University’s '
            'Space Weather Analytics for Solar Flares benchmark data set, we examine the impacts of '
            'training methodology and the solar cycle on decision tree, support vector machine, and '
            'multilayer perceptron performance. We implement our classifiers using three temporal '
            'training windows: stationary, rolling, and expanding. The stationary window trains '
            'models using a single set of data available before the first forecasting instance, '
            'which remains constant throughout the solar cycle. The rolling window trains models '
            'using data from a constant time interval before the forecasting instance, which moves '
            'with the solar cycle. Finally, the expanding window trains models using all available '
            'data before the forecasting instance. For each window, a number of input features (1, '
            '5, 10, 25, 50, and 120) and temporal sizes (5, 8, 11, 14, 17, and 20 months) were '
            'tested. To our surprise, we found that, for a window of 20 months, skill scores were '
            'comparable regardless of the window type, feature count, and classifier selected. '
            'Furthermore, reducing the size of this window only marginally decreased stationary and '
            'rolling window performance. This implies that, given enough data, a stationary window '
            'can be chosen over other window types, eliminating the need for model retraining. '
            'Finally, a moderately strong positive correlation was found to exist between a '
            'model’s false-positive rate and the solar X-ray background flux. This suggests that '
            'the solar cycle phase has a considerable influence on forecasting.'
        ),
    },
]

ARXIV_RE = re.compile(r'^(\d{4}\.\d{5})')
AUTHOR_FILENAME_RE = re.compile(r'Goodwin_\d{4}_')
PUBLICATION_RE = re.compile(r'Goodwin_(\d{4})_(\w+)_(\d+)_(\d+)')
AUTHOR_INITIAL_RE = re.compile(r'[A-Z][a-z]+ [A-Z]\. [A-Z]')

ABSTRACT_KEYWORDS = ('abstract', 'summary')
SECTION_KEYWORDS = ('introduction', 'keywords', '1.', 'i.', 'background')
AUTHOR_STOP_WORDS = ('abstract', 'keywords', 'introduction')

JOURNAL_NAMES = {
    'ApJ': 'The Astrophysical Journal',
}


def parse_paper_from_filename(pdf_path):
    """Guesses paper details from a PDF filename.

    Understands arXiv ids (``2505.10390v1.pdf``) and the
    ``Goodwin_<year>_<journal>_<volume>_<page>.pdf`` naming scheme.
    """
    filename = pdf_path.split('/')[-1].replace('.pdf', '')
    title = ''
    publication_info = ''
    arxiv_id = ''

    arxiv_match = ARXIV_RE.match(filename)
    if arxiv_match:
        arxiv_id = arxiv_match.group(1)
        publication_info = f'arXiv:{arxiv_id}'
        title = f'Research Paper - arXiv:{arxiv_id}'
    elif AUTHOR_FILENAME_RE.search(filename):
        match = PUBLICATION_RE.search(filename)
        if match:
            year, journal, volume, page = match.groups()
            publication_info = f'{journal} {year}, {volume}, {page}'
            title = f'Published in {JOURNAL_NAMES.get(journal, journal)} ({year})'
        else:
            title = filename.replace('_', ' ')
    else:
        title = filename.replace('_', ' ')
        publication_info = filename

    return {
        'title': title,
        'authors': DEFAULT_AUTHOR,
        'publication_info': publication_info or filename,
        'abstract': '',
        'arxiv_id': arxiv_id,
        'filename': filename,
        'path': pdf_path,
    }


def _find_title(lines):
    for line in lines[:10]:
        if 20 < len(line) < 300:
            return line
    return ''


def _find_authors(lines, title):
    title_index = -1
    if title:
        for i, line in enumerate(lines):
            if line == title or title[:20] in line:
                title_index = i
                break

    start = title_index + 1 if title_index >= 0 else 0
    authors = ''
    for line in lines[start:title_index + 10]:
        lowered = line.lower()
        if any(word in lowered for word in AUTHOR_STOP_WORDS) or len(line) > 200:
            break
        word_count = len(line.split(' '))
        if ',' in line or ' and ' in line or 2 <= word_count <= 15:
            if '@' in line or AUTHOR_INITIAL_RE.search(line):
                return line
            if not authors and 10 < len(line) < 200:
                authors = line
    return authors


def _find_abstract(lines):
    start = -1
    for i, line in enumerate(lines):
        if any(keyword in line.lower() for keyword in ABSTRACT_KEYWORDS):
            start = i
            break
    if start < 0:
        return ''

    collected = []
    for line in lines[start + 1:]:
        if line.lower().startswith(SECTION_KEYWORDS):
            break
        # short all-caps lines are section headers
        if 3 < len(line) < 50 and line == line.upper():
            break
        collected.append(line)

    abstract = ' '.join(collected).strip()
    if len(abstract) > ABSTRACT_MAX_LENGTH:
        abstract = abstract[:ABSTRACT_MAX_LENGTH] + '...'
    return abstract


def extract_paper_metadata(pdf_path, base_dir='.'):
    """Filename-derived metadata, refined from the PDF when it is readable locally."""
    basic_info = parse_paper_from_filename(pdf_path)
    local_path = os.path.join(base_dir, pdf_path)
    if not os.path.isfile(local_path):
        return basic_info

    try:
        reader = PdfReader(local_path)
        info = reader.metadata or {}
        title = str(info.get('/Title', '') or '').strip()
        authors = str(info.get('/Author', '') or '').strip()
    except (PdfReadError, OSError, ValueError) as e:
        logger.warning(f'Could not extract metadata from {pdf_path}, using filename parsing: {e}')
        return basic_info

    try:
        text = '\n'.join(
            page.extract_text() or '' for page in reader.pages[:PDF_SCAN_PAGES])
        lines = [line.strip() for line in text.split('\n') if line.strip()]
    except (PdfReadError, OSError, ValueError) as e:
        logger.warning(f'Could not extract text from {pdf_path}: {e}')
        lines = []

    title = title or _find_title(lines)
    if not authors or authors == DEFAULT_AUTHOR:
        authors = _find_authors(lines, title)

    return dict(
        basic_info,
        title=title or basic_info['title'],
        authors=authors or basic_info['authors'],
        abstract=_find_abstract(lines),
    )


def build_paper_cards(papers):
    cards = []
    for index, paper in enumerate(papers):
        abstract = paper.get('abstract') or ''
        needs_truncation = len(abstract) > ABSTRACT_PREVIEW_LENGTH
        cards.append({
            'title': paper['title'],
            'authors': paper['authors'],
            'publication_info': paper['publication_info'],
            'path': paper['path'],
            'abstract_id': f'abstract-{index}',
            'abstract': abstract,
            'has_abstract': bool(abstract),
            'needs_truncation': needs_truncation,
            'truncated_abstract': (abstract[:ABSTRACT_PREVIEW_LENGTH] + '...'
                                   if needs_truncation else abstract),
            'delay': round(index * 0.1, 1),
        })
    return cards


def discover_papers(papers_dir):
    """Metadata for PDFs in `papers_dir` that aren't in the hardcoded list."""
    if not os.path.isdir(papers_dir):
        return []
    known = {os.path.basename(paper['path']) for paper in PAPERS}
    base_dir = os.path.dirname(os.path.abspath(papers_dir))
    prefix = os.path.basename(os.path.normpath(papers_dir))
    found = []
    for name in sorted(os.listdir(papers_dir)):
        if name.lower().endswith('.pdf') and name not in known:
            found.append(extract_paper_metadata(f'{prefix}/{name}', base_dir=base_dir))
    return found


def load_papers_section(papers=None, papers_dir=None):
    """Builds the papers section context; never raises."""
    try:
        papers = list(PAPERS if papers is None else papers)
        if papers_dir:
            papers.extend(discover_papers(papers_dir))
        if not papers:
            return dict(papers=[], error=NO_PAPERS_MESSAGE)
        return dict(papers=build_paper_cards(papers), error=None)
    except (KeyError, TypeError, OSError) as e:
        logger.error('Error loading papers: %s', e)
        return dict(papers=[], error=PAPERS_ERROR_MESSAGE)
