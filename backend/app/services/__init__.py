# Services package init
"""
StarPrep Backend — Data-Access Layer
======================================

Service Inventory:
    - QuestionService: insert/list/lookup/composite read/cascading delete of questions
    - AnswerService:   insert answers, scoped answer lookup, insert comments
    - StorageResult:   success value or captured DatabaseError, returned by every helper

Why results instead of raised exceptions:
    Handlers need to tell *which* step failed (an answer lookup failing is
    reported differently from the answer insert failing). Returning the
    failure keeps that decision at the call site.
"""
