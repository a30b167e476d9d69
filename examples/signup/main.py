"""Decoding a signup form: one failing submission, one good one."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from vebben.errors import MultiError
from vebben.forms import Form, FormValues, decode_form, optional_spec, required_spec


@dataclass
class Signup:
    foo: str = ""
    bar: int = 0
    email: str = ""
    born: Optional[datetime] = field(default=None, metadata={"form": "birthday"})


email = required_spec("email", "string", r"re:^[^@\s]+@[^@\s]+\.[^@\s]+$", "Email")
SPECS = [
    required_spec("foo", "string", "6", "Foo"),
    required_spec("bar", "int", "0-100", "Bar Percentage"),
    email,
    email.copy("email_again", "Email (again)"),
    optional_spec("birthday", "date", name="Birthday"),
]


def main():
    target = Signup()

    # A validation failure:
    try:
        decode_form(FormValues.from_query("foo=bar"), SPECS, target)
    except MultiError as e:
        print(e)

    # And a success:
    form = Form({
        "foo": "Bärfuß",
        "bar": "23",
        "email": "me@example.com",
        "email_again": "me@example.com",
        "birthday": "2017.02.25",
    })
    if form.decode(SPECS, target):
        print(target.foo, target.bar, target.born.date())


if __name__ == "__main__":
    main()
