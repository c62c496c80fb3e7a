"""Closed value sets stored in node registers."""

from __future__ import annotations

from enum import Enum, IntEnum


class Frequency(IntEnum):
    FREQ_11 = 11
    FREQ_12 = 12
    FREQ_13 = 13
    FREQ_14 = 14
    FREQ_15 = 15
    FREQ_16 = 16
    FREQ_17 = 17
    FREQ_18 = 18
    FREQ_19 = 19
    FREQ_20 = 20
    FREQ_21 = 21
    FREQ_22 = 22
    FREQ_23 = 23
    FREQ_24 = 24
    FREQ_25 = 25
    FREQ_26 = 26

    @property
    def mhz(self) -> int:
        return 2405 + 5 * (self.value - 11)


class SamplingMode(IntEnum):
    SYNC = 1
    NON_SYNC = 2
    SYNC_BURST = 3
    ARMED_DATALOG = 4
    SYNC_EVENT = 5


class DefaultMode(IntEnum):
    IDLE = 0
    LDC = 1
    DATALOG = 3
    SLEEP = 5
    SYNC = 6


class TransmitPower(IntEnum):
    POWER_0DBM = 0
    POWER_5DBM = 5
    POWER_10DBM = 10
    POWER_16DBM = 16
    POWER_20DBM = 20


class DataFormat(IntEnum):
    TWO_BYTE_UINT = 1
    FOUR_BYTE_FLOAT = 2


class DataCollectionMethod(IntEnum):
    LOG_ONLY = 1
    TRANSMIT_ONLY = 2
    LOG_AND_TRANSMIT = 3


class SampleRate(IntEnum):
    """Sample rate codes as stored in the sample rate registers."""

    HZ_1 = 100
    HZ_2 = 101
    HZ_4 = 102
    HZ_8 = 103
    HZ_16 = 104
    HZ_32 = 105
    HZ_64 = 106
    HZ_128 = 107
    HZ_256 = 108
    HZ_512 = 109
    HZ_1024 = 110
    HZ_2048 = 111
    HZ_4096 = 112
    EVERY_30_SECONDS = 200
    EVERY_1_MINUTE = 201
    EVERY_5_MINUTES = 202


class CalCoefUnit(IntEnum):
    NONE = 0
    BITS = 1
    VOLTS = 2
    MILLIVOLTS = 3
    STRAIN = 4
    MICROSTRAIN = 5
    G = 6
    CELSIUS = 7
    FAHRENHEIT = 8
    KELVIN = 9


class CalCoefEquationType(IntEnum):
    NONE = 0
    STANDARD = 4


class SettlingTime(IntEnum):
    MS_4 = 0
    MS_8 = 1
    MS_16 = 2
    MS_32 = 3
    MS_40 = 4
    MS_48 = 5
    MS_60 = 6
    MS_101_25 = 7
    MS_120 = 8
    MS_200 = 9


class ThermocoupleType(IntEnum):
    K = 0
    J = 1
    R = 2
    S = 3
    T = 4
    E = 5
    B = 6
    N = 7


class RegionCode(IntEnum):
    USA = 0
    EUROPE = 1
    JAPAN = 2
    OTHER = 3
    BRAZIL = 4


class MicroControllerType(IntEnum):
    PIC18F452 = 31
    PIC18F46K20 = 32
    PIC24F = 2401
    EFR32 = 3200


class AutoBalanceOption(IntEnum):
    LOW = 0
    MIDSCALE = 1
    HIGH = 2


class ChannelSetting(str, Enum):
    """Per-channel settings a feature profile can map to a register."""

    HARDWARE_GAIN = "hardware_gain"
    HARDWARE_OFFSET = "hardware_offset"
    LINEAR_EQUATION = "linear_equation"
    UNIT = "unit"
    EQUATION_TYPE = "equation_type"
    FILTER_SETTLING_TIME = "filter_settling_time"
    THERMOCOUPLE_TYPE = "thermocouple_type"


# Model number of the SHM-Link 2, the only node running shmLink auto-calibration.
MODEL_SHM_LINK_2 = 63090100
