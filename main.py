from rich.pretty import pprint

from argline import *


@optstore
class Options:
    verbose: bool = opt(cfg="v,verbose", desc="Print the parsed invocation.")
    level: uint8 = opt(cfg="l,level=1", desc="Logging level.", arg="<n>")
    includes: list[str] = opt(cfg="I,include", desc="Directories to search.", arg="<dir>")
    output: str | None = opt(cfg="o,output", desc="Write to a file.", arg="<file>")


if __name__ == '__main__':
    options = Options()
    invocation = Invocation.from_os_args()

    try:
        sub = invocation.parse_until_sub_cmd_for(options)
    except ArglineError as exception:
        trigger(exception, shell=True)
    else:
        help = Help()
        help.add_text("Usage: %s [options...] [command [args...]]" % (invocation.name or "main.py"))
        help.add_text("")
        help.add_text("Options:")
        help.add_opts(options.__optcfgs__(), margin_left=2)
        help.print()

        if options.verbose:
            pprint(invocation)
            pprint(options)
            pprint(sub)
