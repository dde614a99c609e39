"""
Seed roster written to an empty local store on first access.
"""

SEED_STUDENTS = [
    {
        'id': '1',
        'studentId': 'S001',
        'studentName': 'Ravi Sharma',
        'className': 'V',
        'section': 'MAHA',
        'rollNo': '101',
        'dateOfBirth': '2015-05-15',
        'fatherName': 'Ajay Sharma',
        'phoneNumber': '9876543210',
        'emailId': 'ravi@example.com',
        'photoUrl': 'https://placehold.co/100x100/1e40af/ffffff?text=Ravi',
        'signatureUrl': 'https://placehold.co/150x50/3b82f6/ffffff?text=Signature',
    },
    {
        'id': '2',
        'studentId': 'S002',
        'studentName': 'Priya Singh',
        'className': 'IX',
        'section': 'RISHI',
        'rollNo': '205',
        'dateOfBirth': '2011-11-22',
        'fatherName': 'Manoj Singh',
        'phoneNumber': '9988776655',
        'emailId': 'priya@example.com',
        'photoUrl': 'https://placehold.co/100x100/dc2626/ffffff?text=Priya',
        'signatureUrl': 'https://placehold.co/150x50/ef4444/ffffff?text=Signature',
    },
    {
        'id': '3',
        'studentId': 'S003',
        'studentName': 'Aarav Patel',
        'className': 'II',
        'section': 'MAHA',
        'rollNo': '056',
        'dateOfBirth': '2018-08-01',
        'fatherName': 'Vijay Patel',
        'phoneNumber': '9001122334',
        'emailId': 'aarav@example.com',
        'photoUrl': 'https://placehold.co/100x100/059669/ffffff?text=Aarav',
        'signatureUrl': 'https://placehold.co/150x50/10b981/ffffff?text=Signature',
    },
    {
        'id': '4',
        'studentId': 'S004',
        'studentName': 'Deepak Kumar',
        'className': 'XII',
        'section': 'NONE',
        'rollNo': '301',
        'dateOfBirth': '2008-01-01',
        'fatherName': 'Ram Kumar',
        'phoneNumber': '9123456789',
        'emailId': 'deepak@example.com',
        'photoUrl': 'https://placehold.co/100x100/f59e0b/ffffff?text=Deepak',
        'signatureUrl': 'https://placehold.co/150x50/fbbf24/ffffff?text=Signature',
    },
]
