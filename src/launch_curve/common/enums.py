from enum import Enum


class CurveShapeType(Enum):
    THRESHOLD_POWER = "THRESHOLD_POWER"
    LOGISTIC_BLEND = "LOGISTIC_BLEND"
    PIECEWISE_EXPONENTIAL = "PIECEWISE_EXPONENTIAL"

    @classmethod
    def from_str(cls, shape_str: str) -> "CurveShapeType":
        """
        Convert a string to a CurveShapeType enum.
        :param shape_str: str
        :return: CurveShapeType or NotImplementedError
        """
        if shape_str.upper() == CurveShapeType.THRESHOLD_POWER.name:
            return CurveShapeType.THRESHOLD_POWER
        elif shape_str.upper() == CurveShapeType.LOGISTIC_BLEND.name:
            return CurveShapeType.LOGISTIC_BLEND
        elif shape_str.upper() == CurveShapeType.PIECEWISE_EXPONENTIAL.name:
            return CurveShapeType.PIECEWISE_EXPONENTIAL
        else:
            raise NotImplementedError(f"No curve shape enum for {shape_str}")

    def __hash__(self):
        return hash(self.value)

    def __str__(self):
        return self.name

    def __repr__(self):
        return self.__str__()


class ThresholdUnit(Enum):
    TOKENS = "TOKENS"
    PERCENT = "PERCENT"
    PROGRESS = "PROGRESS"

    @classmethod
    def from_str(cls, unit_str):
        if unit_str.upper() == ThresholdUnit.TOKENS.name:
            return ThresholdUnit.TOKENS
        elif unit_str.upper() == ThresholdUnit.PERCENT.name:
            return ThresholdUnit.PERCENT
        elif unit_str.upper() == ThresholdUnit.PROGRESS.name:
            return ThresholdUnit.PROGRESS
        else:
            raise NotImplementedError(f"No threshold unit enum for {unit_str}")

    def __str__(self):
        return self.name

    def __repr__(self):
        return self.__str__()


class OrderSide(Enum):
    BUY = "BUY"
    SELL = "SELL"

    @classmethod
    def from_str(cls, side_str):
        if side_str.upper() == OrderSide.BUY.name:
            return OrderSide.BUY
        elif side_str.upper() == OrderSide.SELL.name:
            return OrderSide.SELL
        else:
            raise NotImplementedError(f"No order side enum for {side_str}")

    def __str__(self):
        return self.name

    def __repr__(self):
        return self.__str__()
