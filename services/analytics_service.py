"""
Read-only summaries over the waitlist for the admin dashboard.

Nothing here writes to the store or takes locks; concurrent registrations
may or may not be visible to a given query.
"""
import csv
import io
import logging
import re
from collections import Counter
from datetime import date, datetime, timedelta
from flask import current_app
from models.admin import db
from models.waitlist import WaitlistEntry, CSV_COLUMNS
from utils.date_utils import utcnow
from utils.errors import ValidationFailed

logger = logging.getLogger(__name__)

BREAKDOWN_FIELDS = {
    'industry': WaitlistEntry.industry,
    'companySize': WaitlistEntry.company_size,
}

STOPWORDS = frozenset([
    'the', 'and', 'that', 'have', 'for', 'not', 'with', 'you', 'this', 'but',
    'his', 'from', 'they', 'will', 'would', 'there', 'their', 'what', 'about',
    'which', 'when', 'make', 'like', 'time', 'just', 'know', 'people', 'into',
    'year', 'good', 'some', 'could', 'them', 'see', 'other', 'than', 'then',
    'now', 'look', 'only', 'come', 'its', 'over', 'think', 'also', 'back',
    'after', 'use', 'two', 'how', 'our', 'work', 'first', 'well', 'way', 'even',
    'new', 'want', 'because', 'any', 'these', 'give', 'day', 'most', 'us',
    'very', 'much', 'more', 'been', 'being', 'were', 'does', 'doing', 'each',
    'such', 'your', 'yours', 'here', 'where', 'while', 'should', 'really',
    'need', 'needs', 'lots', 'many', 'every', 'still', 'across', 'without',
])
MIN_WORD_LENGTH = 4
_TOKEN_SPLIT = re.compile(r'[^a-z0-9]+')

_verified_sum = db.func.sum(db.case((WaitlistEntry.is_verified.is_(True), 1), else_=0))


def _window_days(value):
    if value is None or value == '':
        return current_app.config['ANALYTICS_DEFAULT_DAYS']
    try:
        days = 0 if isinstance(value, bool) else int(value)
    except (TypeError, ValueError):
        days = 0
    if days < 1:
        raise ValidationFailed.for_field('days', 'days must be a positive integer')
    # the window start has to stay a representable datetime
    if days > (utcnow() - datetime.min).days:
        raise ValidationFailed.for_field('days', 'days is too large')
    return days


def _day_key(value):
    # SQLite hands back 'YYYY-MM-DD' strings, PostgreSQL hands back dates
    if isinstance(value, date):
        return value.isoformat()
    return str(value)[:10]


def growth_series(window_days=None):
    """
    Registrations per UTC calendar day over the last ``window_days`` days.

    ``verified`` counts entries that are verified now, so a sign-up verified
    on a later day still lands on its creation day. Days without sign-ups are
    left out of the series.
    """
    days = _window_days(window_days)
    since = utcnow() - timedelta(days=days)
    day = db.func.date(WaitlistEntry.created_at)

    rows = (
        db.session.query(
            day.label('day'),
            db.func.count(WaitlistEntry.id).label('count'),
            _verified_sum.label('verified'),
        )
        .filter(WaitlistEntry.created_at >= since)
        .group_by(day)
        .order_by(day)
        .all()
    )
    return [
        {'day': _day_key(row.day), 'count': int(row.count), 'verified': int(row.verified or 0)}
        for row in rows
    ]


def category_breakdown(field):
    column = BREAKDOWN_FIELDS.get(field)
    if column is None:
        raise ValidationFailed.for_field('field', f"Breakdown field must be one of: {', '.join(BREAKDOWN_FIELDS)}")

    count = db.func.count(WaitlistEntry.id)
    rows = (
        db.session.query(column.label('value'), count.label('count'), _verified_sum.label('verified'))
        .group_by(column)
        .order_by(count.desc(), column.asc())
        .all()
    )
    return [
        {'value': row.value, 'count': int(row.count), 'verifiedCount': int(row.verified or 0)}
        for row in rows
    ]


def tokenize(text):
    return [token for token in _TOKEN_SPLIT.split(text.lower()) if token]


def pain_point_keywords(limit=None):
    limit = limit or current_app.config['ANALYTICS_TOP_WORDS']
    texts = [row.pain_points or '' for row in db.session.query(WaitlistEntry.pain_points).all()]

    counts = Counter(
        token
        for token in tokenize(' '.join(texts))
        if len(token) >= MIN_WORD_LENGTH and token not in STOPWORDS
    )
    top = sorted(counts.items(), key=lambda item: (-item[1], item[0]))[:limit]
    return {
        'totalEntries': len(texts),
        'topWords': [{'word': word, 'count': count} for word, count in top],
    }


def dashboard(window_days=None):
    return {
        'growth': growth_series(window_days),
        'industry': category_breakdown('industry'),
        'companySize': category_breakdown('companySize'),
        'painPoints': pain_point_keywords(),
    }


def export_snapshot():
    """
    All entries as CSV rows, header first.

    The rows come from a single SELECT, so the snapshot is whatever the
    database saw at that statement; verification codes are never exported.
    """
    entries = (
        WaitlistEntry.query
        .order_by(WaitlistEntry.created_at.asc(), WaitlistEntry.id.asc())
        .all()
    )
    logger.info(f"Exporting {len(entries)} waitlist entries")
    rows = [[header for header, _ in CSV_COLUMNS]]
    rows.extend(entry.to_csv_row() for entry in entries)
    return rows


def iter_csv(rows):
    """Yield CSV lines one at a time with standard quoting."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    for row in rows:
        writer.writerow(row)
        yield buffer.getvalue()
        buffer.seek(0)
        buffer.truncate(0)


def export_csv():
    return ''.join(iter_csv(export_snapshot()))


def export_filename(now=None):
    now = now or utcnow()
    return f"waitlist-export-{now.strftime('%Y-%m-%d-%H-%M')}.csv"
