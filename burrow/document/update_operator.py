from enum import StrEnum


class UpdateOperator(StrEnum):
    """ Atomic update operators applied server-side by find_one_and_update. """
    SET = "$set"
    UNSET = "$unset"
    INC = "$inc"
    PUSH = "$push"
    ADD_TO_SET = "$addToSet"
    POP = "$pop"
    PULL = "$pull"
