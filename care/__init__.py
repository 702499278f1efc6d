"""Patient portal application.

Models, serializers, services and views behind the portal's API:
appointments, health records, prescriptions, lab reports, hospital
search and the signed-in user's profile.
"""
