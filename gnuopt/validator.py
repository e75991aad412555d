"""
gnuopt post-scan validation.

validate(options) runs after a successful scan and enforces the cross-option
constraints declared on the set. The first violation is raised:

1. required groups must have members (UnknownGroupError, declaration tier);
2. mandatory options, in declaration order (MandatoryOptionError);
3. groups, in order of creation:
   • two or more members seen -> ExclusiveOptionsError naming the first two
     in declaration order,
   • required group with no member seen -> RequiredGroupError listing every
     member in declaration order.
"""
from .faults import *


def validate(options, /):
    program = options.program
    groups = options.groups

    for group in options.required:
        if not groups.get(group):
            options.trigger(UnknownGroupError(
                "%s: required group %r has no options" % (program, group),
                title="unknown group",
                code=FaultCode.UNKNOWN_GROUP,
                group=group,
                hint="assign options to the group with set_group() before requiring it",
            ))

    for option in options:
        if option.mandatory and not option.seen:
            raise MandatoryOptionError(
                "%s: option %s is mandatory" % (program, option.name),
                title="mandatory option",
                code=FaultCode.MANDATORY_OPTION,
                program=program,
                option=option,
                hint="pass %s" % option.name,
            )

    required = options.required
    for group, members in groups.items():
        seen = [option for option in members if option.seen]
        if len(seen) > 1:
            first, second = seen[:2]
            raise ExclusiveOptionsError(
                "%s: options %s and %s are mutually exclusive" % (program, first.name, second.name),
                title="mutually exclusive options",
                code=FaultCode.EXCLUSIVE_OPTIONS,
                program=program,
                group=group,
                conflicting=(first, second),
                hint="pass only one of %s" % ", ".join(option.name for option in members),
            )
        if not seen and group in required:
            raise RequiredGroupError(
                "%s: exactly one of the following options must be specified: %s" % (
                    program, ", ".join(option.name for option in members)
                ),
                title="missing required option",
                code=FaultCode.REQUIRED_GROUP,
                program=program,
                group=group,
                hint="pass one of %s" % ", ".join(option.name for option in members),
            )


__all__ = (
    "validate",
)
