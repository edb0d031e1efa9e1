from dynamic_forms.fields.groups import (apply_expression_properties, flatten_fields,
                                         get_form_with_field_groups, group_collapsed)
from dynamic_forms.forms import FormControl


def field(key, **kwargs):
    return {'key': key, 'widgetType': 'textInput', 'templateOptions': {'property': key.split('.')[-1]}, **kwargs}


def by_property(*names):
    return lambda f: f['templateOptions']['property'] in names


def test_fields_are_partitioned():
    fields = [field('subject'), field('dueDate'), field('_links.priority'), field('_links.status')]
    groups = [
        {'name': 'Details', 'fieldsFilter': by_property('dueDate', 'priority')},
        {'name': 'Other', 'fieldsFilter': by_property('priority', 'status')},
    ]
    result = get_form_with_field_groups(groups, fields)

    assert [f.get('key') for f in result[:1]] == ['subject']
    details, other = result[1:]
    assert [f['key'] for f in details['fieldGroup']] == ['dueDate', '_links.priority']
    # priority was already claimed by the first group
    assert [f['key'] for f in other['fieldGroup']] == ['_links.status']

    leaves = flatten_fields(result)
    assert sorted(f['key'] for f in leaves) == sorted(f['key'] for f in fields)


def test_empty_groups_are_dropped():
    fields = [field('subject')]
    result = get_form_with_field_groups([{'name': 'Costs', 'fieldsFilter': by_property('costs')}], fields)
    assert result == fields


def test_group_without_filter_takes_everything_left():
    fields = [field('subject'), field('dueDate')]
    result = get_form_with_field_groups([
        {'name': 'Dates', 'fieldsFilter': by_property('dueDate')},
        {'name': 'Everything else'},
    ], fields)
    assert [g['templateOptions']['label'] for g in result] == ['Dates', 'Everything else']
    assert [f['key'] for f in result[1]['fieldGroup']] == ['subject']


def test_fields_without_key_stay_on_top():
    fields = [{'widgetType': 'textInput', 'templateOptions': {}}]
    assert get_form_with_field_groups([{'name': 'All'}], fields) == fields


def test_group_defaults_and_settings():
    fields = [field('dueDate')]
    expression = lambda model, form_state, f: 'highlight'
    group, = get_form_with_field_groups([{
        'name': 'Details',
        'fieldsFilter': by_property('dueDate'),
        'settings': {
            'templateOptions': {'label': 'More details', 'collapsibleFieldGroupsCollapsed': False},
            'expressionProperties': {'className': expression},
        },
    }], fields)
    assert group['widgetType'] == 'fieldGroup'
    assert group['templateOptions'] == {
        'label': 'More details',
        'isFieldGroup': True,
        'collapsibleFieldGroups': True,
        'collapsibleFieldGroupsCollapsed': False,
    }
    assert group['expressionProperties']['className'] is expression
    assert 'templateOptions.collapsibleFieldGroupsCollapsed' in group['expressionProperties']


def test_assembly_is_idempotent():
    fields = [field('subject'), field('dueDate')]
    groups = [{'name': 'Dates', 'fieldsFilter': by_property('dueDate')}]
    once = get_form_with_field_groups(groups, fields)
    twice = get_form_with_field_groups(groups, once)
    assert [f.get('key') for f in once] == [f.get('key') for f in twice]
    assert [f['key'] for f in twice[-1]['fieldGroup']] == ['dueDate']


def test_group_collapsed_rule():
    failing = FormControl()
    failing.set_errors({'dueDate': {'message': 'is invalid'}})
    group = {'fieldGroup': [field('subject', formControl=FormControl()), field('dueDate', formControl=failing)]}

    assert group_collapsed(group, submitted=False)
    assert not group_collapsed(group, submitted=True)

    group['fieldGroup'][1]['hide'] = True
    assert group_collapsed(group, submitted=True)
    assert group_collapsed({'fieldGroup': [field('subject')]}, submitted=True)


def test_group_expands_on_submitted_errors():
    control = FormControl()
    fields = [field('dueDate', formControl=control)]
    result = get_form_with_field_groups([{'name': 'Dates'}], fields)

    apply_expression_properties(result, {}, {'submitted': True})
    assert result[0]['templateOptions']['collapsibleFieldGroupsCollapsed'] is True

    control.set_errors({'dueDate': {'message': 'is invalid'}})
    apply_expression_properties(result, {}, {'submitted': False})
    assert result[0]['templateOptions']['collapsibleFieldGroupsCollapsed'] is True

    apply_expression_properties(result, {}, {'submitted': True})
    assert result[0]['templateOptions']['collapsibleFieldGroupsCollapsed'] is False

    # once open, the group stays open
    control.set_errors(None)
    apply_expression_properties(result, {}, {'submitted': True})
    assert result[0]['templateOptions']['collapsibleFieldGroupsCollapsed'] is False
