import os

# File paths
SNAPSHOT_FILE = os.getenv('ANALYTICS_SNAPSHOT_FILE', 'snapshots.csv')  # One row per question response

# Flask
SECRET_KEY = os.getenv('ANALYTICS_SECRET_KEY', 'your_secret_key')  # Replace with a secure key in production
LOG_LEVEL = os.getenv('ANALYTICS_LOG_LEVEL', 'INFO')

# Snapshot CSV header, in the order the portal exports it
SNAPSHOT_HEADERS = [
    'id', 'academicYearId', 'academicYearString',
    'departmentId', 'departmentName', 'departmentAbbreviation',
    'semesterId', 'semesterNumber', 'divisionId', 'divisionName',
    'subjectId', 'subjectName', 'subjectAbbreviation', 'subjectCode',
    'facultyId', 'facultyName', 'facultyAbbreviation', 'studentId',
    'questionId', 'questionType', 'questionCategoryId', 'questionCategoryName',
    'questionBatch', 'lectureType', 'batch', 'responseValue', 'submittedAt'
]

# Ratings
RATING_PRECISION = 2
RATING_SCALE_MAX = float(os.getenv('ANALYTICS_RATING_SCALE_MAX', '10'))
NOT_AVAILABLE = 'N/A'

# Lecture/lab designators
LECTURE = 'LECTURE'
LAB = 'LAB'
UNCLASSIFIED = 'UNCLASSIFIED'
LAB_CATEGORY_MARKERS = ('lab', 'laboratory')

# Batch labels meaning "no batch restriction"
NO_BATCH_VALUES = ('', 'none', '-')

# Division/batch engagement score: one point per this many responses, capped
ENGAGEMENT_RESPONSES_PER_POINT = 5
ENGAGEMENT_SCORE_MAX = 10

# Export
EXPORT_DELIMITER = ','
EXPORT_MIMETYPE = 'text/csv'
