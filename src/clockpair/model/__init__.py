"""
The MODEL layer contains data structures and pure time logic.
It knows nothing about widgets; FieldState is a QObject only for its signals.
It deals with Locations, Time Math, Field State and Persistence.
"""
